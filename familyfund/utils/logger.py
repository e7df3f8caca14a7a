"""
Logging Setup
-------------
Single `fraud_engine` logger shared by the scoring engine, the persistence
layer and the API.

- DEBUG mode: colored console lines
- otherwise: JSON lines on stdout + rotating file
- CloudWatch shipping when AWS credentials are present
"""

import logging
import json
import sys
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Optional

import boto3
from botocore.exceptions import ClientError, NoCredentialsError

from familyfund.config import config

# =========================================================
# 🧱 Global Logger Setup
# =========================================================
logger = logging.getLogger("fraud_engine")
logger.setLevel(getattr(logging, config.LOG_LEVEL.upper(), logging.INFO))

# Avoid duplicate handlers if reimported
if logger.hasHandlers():
    logger.handlers.clear()

# Context fields that callers pass through `extra=`
CONTEXT_FIELDS = ("actor_id", "family_id", "score")


# =========================================================
# 🧩 Formatters
# =========================================================
class JSONFormatter(logging.Formatter):
    """JSON format for structured logs (CloudWatch / ELK friendly)."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


class ColoredFormatter(logging.Formatter):
    """Simple color-coded output for dev mode."""

    COLORS = {"DEBUG": "\033[36m", "INFO": "\033[32m", "WARNING": "\033[33m", "ERROR": "\033[31m", "END": "\033[0m"}

    def format(self, record):
        color = self.COLORS.get(record.levelname, "")
        msg = super().format(record)
        return f"{color}{msg}{self.COLORS['END']}"


# =========================================================
# 🖥️ Console Handler (always active)
# =========================================================
console_handler = logging.StreamHandler(sys.stdout)
console_handler.setLevel(logging.DEBUG if config.DEBUG else logging.INFO)
console_handler.setFormatter(
    ColoredFormatter("%(asctime)s - %(levelname)s - %(message)s")
    if config.DEBUG else JSONFormatter()
)
logger.addHandler(console_handler)

# =========================================================
# 📁 File Handler (Rotating)
# =========================================================
if not config.DEBUG and not config.is_test:
    file_handler = RotatingFileHandler(config.LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=5)
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(JSONFormatter())
    logger.addHandler(file_handler)
    logger.info(f"File logging active: {config.LOG_FILE}")


# =========================================================
# ☁️ CloudWatch Handler (AWS Integration)
# =========================================================
class CloudWatchHandler(logging.Handler):
    """Ships JSON-formatted records to a CloudWatch Logs stream."""

    def __init__(self, log_group: str, log_stream: str, client=None):
        super().__init__()
        self.log_group = log_group
        self.log_stream = log_stream
        self.sequence_token: Optional[str] = None
        self.client = client if client is not None else self._init_client()

    def _init_client(self):
        try:
            client = boto3.client("logs", region_name=config.AWS_REGION)
            for create, kwargs in (
                (client.create_log_group, {"logGroupName": self.log_group}),
                (client.create_log_stream, {"logGroupName": self.log_group, "logStreamName": self.log_stream}),
            ):
                try:
                    create(**kwargs)
                except client.exceptions.ResourceAlreadyExistsException:
                    pass
            logger.info(f"✅ CloudWatch logging enabled: {self.log_group}/{self.log_stream}")
            return client
        except NoCredentialsError:
            logger.warning("⚠️ AWS credentials not found – CloudWatch disabled.")
            return None
        except ClientError as e:
            logger.error(f"❌ CloudWatch init error: {e}")
            return None

    def emit(self, record: logging.LogRecord):
        if not self.client:
            return
        event = {
            "logGroupName": self.log_group,
            "logStreamName": self.log_stream,
            "logEvents": [
                {
                    "timestamp": int(record.created * 1000),
                    "message": JSONFormatter().format(record),
                }
            ],
        }
        if self.sequence_token:
            event["sequenceToken"] = self.sequence_token
        try:
            response = self.client.put_log_events(**event)
            self.sequence_token = response.get("nextSequenceToken")
        except ClientError:
            self.handleError(record)


if os.getenv("AWS_ACCESS_KEY_ID") and os.getenv("AWS_SECRET_ACCESS_KEY"):
    cw_handler = CloudWatchHandler("familyfund-logs", "fraud-engine-stream")
    cw_handler.setLevel(logging.INFO)
    logger.addHandler(cw_handler)
