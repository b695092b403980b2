"""Logging setup driven by the ``logging`` section of config.json."""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Iterable, Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class RedactingFormatter(logging.Formatter):
    """Masks secret values in fully rendered records, tracebacks included."""

    def __init__(self, secrets: Iterable[str]) -> None:
        super().__init__(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
        # Longest first so a secret containing another is masked whole.
        self._secrets = sorted({secret for secret in secrets if secret}, key=len, reverse=True)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def secrets_from_env(redact_cfg: dict) -> list[str]:
    """Values of the environment variables listed under redact.patterns."""

    if not redact_cfg.get("enabled", False):
        return []
    return [os.environ[name] for name in redact_cfg.get("patterns", []) if os.environ.get(name)]


def _file_handler(file_cfg: dict, project_root: str) -> Optional[logging.Handler]:
    if not file_cfg.get("enabled", False):
        return None
    path = file_cfg.get("path", "logs/solvedbot.log")
    if not os.path.isabs(path):
        path = os.path.join(project_root, path)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    return RotatingFileHandler(
        path,
        maxBytes=int(file_cfg.get("max_bytes", 5 * 1024 * 1024)),
        backupCount=int(file_cfg.get("backup_count", 5)),
        encoding="utf-8",
    )


def configure_logging(config: dict, project_root: str) -> None:
    """Install console and rotating-file handlers on the root logger."""

    if not config or not config.get("enabled", False):
        return

    level = getattr(logging, str(config.get("level", "INFO")).upper(), logging.INFO)
    candidates = [
        logging.StreamHandler() if config.get("console", True) else None,
        _file_handler(config.get("file", {}), project_root),
    ]
    handlers = [handler for handler in candidates if handler is not None]
    if not handlers:
        return

    # The bot token is part of every Bot API URL, so it must never reach a log.
    formatter = RedactingFormatter(secrets_from_env(config.get("redact", {})))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    logging.basicConfig(level=level, handlers=handlers)
