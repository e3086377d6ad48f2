"""
Secure logging helpers.

Keeps API keys, bearer tokens and passwords out of log output and out of
diagnostic payloads.
"""
import logging
import re
import sys
from typing import Any

SECRET_KEY_HINTS = ("key", "secret", "token", "password", "auth")

_SECRET_PATTERNS = [
    (re.compile(r"(api[_-]?key\s*[=:]\s*)\S+", re.IGNORECASE), r"\1***"),
    (re.compile(r"(password\s*[=:]\s*)\S+", re.IGNORECASE), r"\1***"),
    (re.compile(r"(secret\s*[=:]\s*)\S+", re.IGNORECASE), r"\1***"),
    (re.compile(r"(Bearer\s+)[A-Za-z0-9._\-]+", re.IGNORECASE), r"\1***"),
    (re.compile(r"(Token\s+)[A-Za-z0-9._\-]{8,}"), r"\1***"),
    (re.compile(r"(xi-api-key['\"]?\s*[=:]\s*['\"]?)[A-Za-z0-9._\-]+", re.IGNORECASE), r"\1***"),
]

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def sanitize_log_message(message: str) -> str:
    """Replace secret-looking values in a free-form message with ***."""
    for pattern, replacement in _SECRET_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


def _is_secret_key(key: str) -> bool:
    lowered = key.lower()
    return any(hint in lowered for hint in SECRET_KEY_HINTS)


def sanitize_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively replace values under secret-looking keys with ***."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            result[key] = sanitize_dict(value)
        elif _is_secret_key(str(key)) and value not in (None, ""):
            result[key] = "***"
        else:
            result[key] = value
    return result


def mask_api_keys(api_keys: Any) -> Any:
    """
    Mask a (possibly nested) map of API keys for display.

    Keeps the vendor prefix up to the first dash and the last four characters:
    "sk-abc123def456" -> "sk-****f456". Short strings become "****".
    """
    if not isinstance(api_keys, dict):
        return api_keys

    masked: dict[str, Any] = {}
    for key, value in api_keys.items():
        if isinstance(value, dict):
            masked[key] = mask_api_keys(value)
        elif isinstance(value, str) and len(value) > 4:
            prefix = value[: value.index("-") + 1] if "-" in value else ""
            masked[key] = f"{prefix}****{value[-4:]}"
        elif isinstance(value, str) and value:
            masked[key] = "****"
        else:
            masked[key] = value
    return masked


class SecretRedactingFilter(logging.Filter):
    """Logging filter that sanitizes the rendered message of every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.args:
            try:
                record.msg = record.getMessage()
            except (TypeError, ValueError):
                return True
            record.args = None
        if isinstance(record.msg, str):
            record.msg = sanitize_log_message(record.msg)
        return True


def configure_logging(level: str = "INFO"):
    """Install a redacting root handler (call once at startup)."""
    root = logging.getLogger()
    for handler in root.handlers:
        if any(isinstance(f, SecretRedactingFilter) for f in handler.filters):
            root.setLevel(level.upper())
            return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(SecretRedactingFilter())
    root.addHandler(handler)
    root.setLevel(level.upper())
