"""
Tests unitarios para sistema de logging seguro.
"""
import logging

import pytest

from callkit.core.secure_logging import (
    SecretRedactingFilter,
    configure_logging,
    mask_api_keys,
    sanitize_dict,
    sanitize_log_message,
)


@pytest.mark.unit
class TestSecureLogging:
    """Tests para sanitización de logs y protección de secrets."""

    def test_sanitize_api_key_pattern(self):
        """Test: Sanitiza patrones de API keys."""
        message = "Connecting with api_key=sk-1234567890abcdef"
        result = sanitize_log_message(message)

        assert "sk-1234567890abcdef" not in result
        assert "api_key=***" in result

    def test_sanitize_bearer_token(self):
        """Test: Sanitiza Bearer tokens."""
        message = "Authorization: Bearer abc123def456"
        result = sanitize_log_message(message)

        assert "abc123def456" not in result
        assert "***" in result  # Token sanitizado

    def test_sanitize_password_pattern(self):
        """Test: Sanitiza passwords."""
        message = "password=mySecretPass123"
        result = sanitize_log_message(message)

        assert "mySecretPass123" not in result
        assert "password=***" in result

    def test_sanitize_dict_with_api_key(self):
        """Test: Sanitiza diccionario con API keys."""
        data = {
            "username": "admin",
            "api_key": "sk-1234567890",
            "timeout": 30
        }

        result = sanitize_dict(data)

        assert result["username"] == "admin"
        assert result["api_key"] == "***"
        assert result["timeout"] == 30

    def test_sanitize_dict_nested(self):
        """Test: Sanitiza diccionario anidado."""
        data = {
            "config": {
                "redis_password": "secret123",
                "port": 6379
            },
            "name": "app"
        }

        result = sanitize_dict(data)

        assert result["config"]["redis_password"] == "***"
        assert result["config"]["port"] == 6379
        assert result["name"] == "app"

    def test_sanitize_dict_multiple_secrets(self):
        """Test: Sanitiza múltiples secrets en dict."""
        data = {
            "elevenlabs_api_key": "xi_123",
            "groq_api_key": "gsk_456",
            "deepgram_api_key": "dg_789",
            "twilio_auth_token": "tw_000",
            "normal_value": "not_secret"
        }

        result = sanitize_dict(data)

        # Verificar que los secrets están enmascarados
        assert result["elevenlabs_api_key"] == "***"
        assert result["groq_api_key"] == "***"
        assert result["deepgram_api_key"] == "***"
        assert result["twilio_auth_token"] == "***"
        assert result["normal_value"] == "not_secret"

    def test_configure_logging_installs_one_redacting_handler(self):
        """Test: configure_logging es idempotente."""
        root = logging.getLogger()
        before = list(root.handlers)
        level = root.level
        try:
            configure_logging("debug")
            configure_logging("info")

            added = [h for h in root.handlers if h not in before]
            assert len(added) == 1
            assert any(isinstance(f, SecretRedactingFilter) for f in added[0].filters)
            assert root.level == logging.INFO
        finally:
            for handler in root.handlers[:]:
                if handler not in before:
                    root.removeHandler(handler)
            root.setLevel(level)

    def test_sanitize_preserves_safe_content(self):
        """Test: Contenido seguro no se modifica."""
        safe_message = "User logged in successfully from IP 192.168.1.1"
        result = sanitize_log_message(safe_message)

        assert result == safe_message

    def test_sanitize_deepgram_token_and_xi_key(self):
        """Test: Sanitiza headers de Deepgram y ElevenLabs."""
        message = "headers={'Authorization': 'Token dg_0123456789abcdef', 'xi-api-key': 'xi_abcdef123456'}"
        result = sanitize_log_message(message)

        assert "dg_0123456789abcdef" not in result
        assert "xi_abcdef123456" not in result

    def test_redacting_filter_sanitizes_formatted_args(self):
        """Test: El filtro sanitiza mensajes con argumentos %s."""
        record = logging.LogRecord("t", logging.INFO, __file__, 1, "calling with api_key=%s", ("sk-live-999",), None)

        assert SecretRedactingFilter().filter(record) is True
        assert "sk-live-999" not in record.getMessage()


@pytest.mark.unit
class TestMaskApiKeys:
    """Tests para enmascarar mapas de API keys (per-tenant)."""

    def test_keeps_prefix_and_last_four(self):
        assert mask_api_keys({"openai": "sk-abc123def456"}) == {"openai": "sk-****f456"}

    def test_no_dash_no_prefix(self):
        assert mask_api_keys({"deepgram": "abcdef123456"}) == {"deepgram": "****3456"}

    def test_nested_and_short_values(self):
        result = mask_api_keys({"twilio": {"sid": "AC-123456789", "pin": "1234", "empty": ""}, "n": 5})

        assert result == {"twilio": {"sid": "AC-****6789", "pin": "****", "empty": ""}, "n": 5}

    def test_non_dict_passthrough(self):
        assert mask_api_keys(None) is None
        assert mask_api_keys("sk-abc") == "sk-abc"
