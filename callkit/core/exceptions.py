"""
Exception hierarchy for the adapter layer.

Factory and provider failures carry enough detail (capability, provider,
status, body, valid options) for the caller to log and decide on retry.
"""


class AppError(Exception):
    """Base exception for all application-specific errors."""
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class ConfigurationError(AppError):
    """Raised when there is a missing or invalid configuration."""
    def __init__(self, message: str, details: dict | None = None, code: str = "CONFIG_ERROR"):
        super().__init__(message, code=code, details=details)


class UnknownProviderError(ConfigurationError, ValueError):
    """A configured provider name is not registered for its capability."""
    def __init__(self, capability: str, provider: str, available: list[str]):
        self.capability = capability
        self.provider = provider
        self.available = list(available)
        super().__init__(
            f"Unknown {capability} provider: '{provider}'. "
            f"Available: {', '.join(self.available)}",
            details={"capability": capability, "provider": provider, "available": self.available},
            code="UNKNOWN_PROVIDER",
        )


class UnimplementedCapabilityError(AppError, NotImplementedError):
    """A provider does not implement a required contract operation."""
    def __init__(self, capability: str, operation: str, provider: str | None = None):
        self.capability = capability
        self.operation = operation
        self.provider = provider
        owner = f" by provider '{provider}'" if provider else ""
        super().__init__(
            f"{capability}.{operation}() is not implemented{owner}",
            code="UNIMPLEMENTED_CAPABILITY",
            details={"capability": capability, "operation": operation, "provider": provider},
        )


class InvalidArgumentError(AppError, ValueError):
    """Malformed or insufficient call parameters. Raised before any network I/O."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, code="INVALID_ARGUMENT", details=details)


class ExternalServiceError(AppError):
    """Base for errors related to external APIs (Vapi, ElevenLabs, OpenAI, Deepgram...)."""
    def __init__(self, service: str, message: str, original_error: Exception | None = None):
        details = {"service": service}
        if original_error:
            details["original_error"] = str(original_error)
        super().__init__(f"{service} Error: {message}", code="EXTERNAL_SERVICE_ERROR", details=details)


class ProviderRequestError(ExternalServiceError):
    """
    Non-success response (or transport failure) from a provider API.

    status_code is None when no HTTP response was received.
    """
    def __init__(
        self,
        provider: str,
        status_code: int | None,
        raw_body: str = "",
        original_error: Exception | None = None,
    ):
        self.provider = provider
        self.status_code = status_code
        self.raw_body = raw_body
        status = status_code if status_code is not None else "no response"
        super().__init__(provider, f"API error ({status}): {raw_body}", original_error)
        self.details.update({"status_code": status_code, "raw_body": raw_body})
