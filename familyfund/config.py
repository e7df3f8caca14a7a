"""
Configuration management for the Family Fund fraud engine.
----------------------------------------------------------
- Loads environment variables from `.env` (for local) or the runtime environment.
- Centralized access for database, logging, API and review settings.
"""

import os
import json
from typing import Optional
from dotenv import load_dotenv

# Load .env only in local/dev mode
if os.getenv("ENV", "local") == "local":
    load_dotenv()


class Config:
    """Central configuration object for all service-level environment variables."""

    # =========================================================
    # 🧩 Helper
    # =========================================================
    @staticmethod
    def _from_env(key: str, default: Optional[str] = None, cast=None):
        """Load environment variable with optional casting."""
        value = os.getenv(key, default)
        if cast and value is not None:
            try:
                return cast(value)
            except ValueError:
                return default
        return value

    # =========================================================
    # 🌐 DATABASE
    # =========================================================
    DB_URL: str = _from_env.__func__("DB_URL", "sqlite:///./familyfund.db")
    AWS_REGION: str = _from_env.__func__("AWS_REGION", "us-east-1")

    # =========================================================
    # ⚙️ REVIEW SETTINGS
    # =========================================================
    # Scores above this value are routed to a treasurer for manual review
    REVIEW_SCORE_THRESHOLD: int = _from_env.__func__("REVIEW_SCORE_THRESHOLD", 20, int)

    # =========================================================
    # 🚀 APP SETTINGS
    # =========================================================
    DEBUG: bool = _from_env.__func__("DEBUG", "True", lambda v: v.lower() == "true")
    LOG_LEVEL: str = _from_env.__func__("LOG_LEVEL", "INFO").upper()
    LOG_FILE: str = _from_env.__func__("LOG_FILE", "familyfund.log")
    API_HOST: str = _from_env.__func__("API_HOST", "0.0.0.0")
    API_PORT: int = _from_env.__func__("API_PORT", 8000, int)
    ENV: str = _from_env.__func__("ENV", "local")  # local/dev/test/prod

    # =========================================================
    # ✅ Computed Properties
    # =========================================================
    @property
    def is_sqlite(self) -> bool:
        return self.DB_URL.startswith("sqlite")

    @property
    def is_test(self) -> bool:
        return self.ENV.lower() in ("test", "testing")

    @property
    def is_aws_runtime(self) -> bool:
        """Detect AWS runtime environment."""
        env_vars = ["AWS_EXECUTION_ENV", "ECS_CONTAINER_METADATA_URI", "LAMBDA_TASK_ROOT"]
        return any(os.getenv(v) for v in env_vars)

    # =========================================================
    # 📋 Config Summary
    # =========================================================
    @staticmethod
    def _redact_url(url: Optional[str]) -> Optional[str]:
        """Hide the password part of a database URL."""
        if not url or "@" not in url or "://" not in url:
            return url
        scheme, rest = url.split("://", 1)
        creds, host = rest.rsplit("@", 1)
        user = creds.split(":", 1)[0]
        return f"{scheme}://{user}:***@{host}"

    def summary(self) -> dict:
        return {
            "ENV": self.ENV,
            "DEBUG": self.DEBUG,
            "LOG_LEVEL": self.LOG_LEVEL,
            "DB_URL": self._redact_url(self.DB_URL),
            "AWS_REGION": self.AWS_REGION,
            "REVIEW_SCORE_THRESHOLD": self.REVIEW_SCORE_THRESHOLD,
            "AWS_RUNTIME": self.is_aws_runtime,
        }

    def print_summary(self) -> None:
        """Pretty-print configuration summary (safe for logs)."""
        print("\n🔧 Active Configuration:")
        print(json.dumps(self.summary(), indent=4))


# =========================================================
# Instantiate Global Config
# =========================================================
config = Config()

if __name__ == "__main__":
    config.print_summary()
