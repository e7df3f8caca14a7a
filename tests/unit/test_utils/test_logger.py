"""
Unit Tests: Logging
-------------------
JSON formatting of context fields and CloudWatch shipping with a stub client.
"""

import json
import logging

from familyfund.utils.logger import CloudWatchHandler, JSONFormatter


def _record(**extra):
    record = logging.LogRecord("fraud_engine", logging.INFO, __file__, 10, "scored claim", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_context():
    entry = json.loads(JSONFormatter().format(_record(actor_id="user_1", family_id="fam_1", score=40)))
    assert entry["message"] == "scored claim"
    assert entry["level"] == "INFO"
    assert (entry["actor_id"], entry["family_id"], entry["score"]) == ("user_1", "fam_1", 40)


def test_json_formatter_omits_missing_context():
    entry = json.loads(JSONFormatter().format(_record()))
    assert "actor_id" not in entry


def test_cloudwatch_handler_ships_and_tracks_token(mocker):
    client = mocker.MagicMock()
    client.put_log_events.return_value = {"nextSequenceToken": "tok-2"}
    handler = CloudWatchHandler("group", "stream", client=client)

    handler.emit(_record(actor_id="user_1"))
    handler.emit(_record())

    first_call, second_call = client.put_log_events.call_args_list
    assert first_call.kwargs["logGroupName"] == "group"
    assert "sequenceToken" not in first_call.kwargs
    assert second_call.kwargs["sequenceToken"] == "tok-2"
    assert json.loads(first_call.kwargs["logEvents"][0]["message"])["actor_id"] == "user_1"
