"""
Logging Setup Module.

Builds the application logger used across all modules. Log calls pass dicts
(``{"message": ..., "repository": ...}``) which are rendered as JSON lines in
production and as readable ``key=value`` text in development.
"""

import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler


class StructuredFormatter(logging.Formatter):
    """Render dict messages as single-line JSON documents."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
        }
        if isinstance(record.msg, dict):
            payload.update(record.msg)
        else:
            payload["message"] = record.getMessage()
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Human readable formatter used when running in development mode."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)-8s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        if isinstance(record.msg, dict):
            fields = dict(record.msg)
            message = fields.pop("message", "")
            extra = " ".join(f"{key}={value}" for key, value in fields.items())
            record = logging.makeLogRecord(record.__dict__)
            record.msg = f"{message} {extra}".strip()
            record.args = None
        return super().format(record)


class LogManager:
    """
    Configure the application logger once.

    Attributes:
        logger (logging.Logger): The configured application logger.
    """

    def __init__(
        self,
        app_name: str,
        log_dir: str = "logs",
        development: bool = False,
        level: int = logging.INFO,
        max_bytes: int = 5 * 1024 * 1024,
        backup_count: int = 3,
    ):
        """
        Args:
            app_name (str): Logger name, also used for the log file name.
            log_dir (str): Directory for the rotating log file.
            development (bool): Use the readable formatter instead of JSON lines.
            level (int): Logging level.
            max_bytes (int): Size at which the log file is rotated.
            backup_count (int): Number of rotated files kept.
        """
        self.logger = logging.getLogger(app_name)
        self.logger.setLevel(level)
        self.logger.propagate = False

        # Avoid stacking handlers when the module is imported more than once
        if self.logger.handlers:
            return

        formatter = DevelopmentFormatter() if development else StructuredFormatter()

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, f"{app_name}.log"),
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(StructuredFormatter())
        self.logger.addHandler(file_handler)
