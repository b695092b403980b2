from __future__ import annotations

import logging

from logging_setup import RedactingFormatter, _file_handler, secrets_from_env


def _record(message: str) -> logging.LogRecord:
    return logging.LogRecord("solvedbot", logging.INFO, __file__, 1, message, None, None)


def test_redacting_formatter_masks_longest_secret_first() -> None:
    formatter = RedactingFormatter(["abc", "123:abc", ""])
    text = formatter.format(_record("POST https://api.telegram.org/bot123:abc/sendMessage"))
    assert "bot***/sendMessage" in text
    assert "abc" not in text


def test_secrets_from_env(monkeypatch) -> None:
    monkeypatch.setenv("BOT_TOKEN", "123:abc")
    monkeypatch.delenv("API_HASH", raising=False)
    cfg = {"enabled": True, "patterns": ["BOT_TOKEN", "API_HASH"]}
    assert secrets_from_env(cfg) == ["123:abc"]
    assert secrets_from_env({"enabled": False, "patterns": ["BOT_TOKEN"]}) == []


def test_file_handler_resolves_relative_path(tmp_path) -> None:
    assert _file_handler({"enabled": False}, str(tmp_path)) is None

    handler = _file_handler({"enabled": True, "path": "logs/bot.log", "backup_count": 2}, str(tmp_path))
    try:
        assert handler.baseFilename == str(tmp_path / "logs" / "bot.log")
        assert handler.backupCount == 2
        assert (tmp_path / "logs").is_dir()
    finally:
        handler.close()
