"""
Base para todos los puertos de capacidad.

A capability port is a class with a fixed operation set. Providers subclass
it; an operation a provider does not override stays a placeholder that raises
UnimplementedCapabilityError, and verify_contract() rejects such a provider
before it is handed to callers.
"""

from abc import ABC
from enum import Enum
from typing import Any, ClassVar

from callkit.core.exceptions import UnimplementedCapabilityError


class Capability(str, Enum):
    """External-service capabilities the adapter layer abstracts."""
    TELEPHONY = "telephony"
    VOICE = "voice"
    LLM = "llm"
    STT = "stt"


class CapabilityPort(ABC):
    """
    Common base for capability ports.

    Attributes:
        capability: Capability served by the port
        OPERATIONS: Names of the operations every provider must implement
        provider_name: Identifier of the concrete provider ("vapi", "mock", ...)
    """

    capability: ClassVar[Capability]
    OPERATIONS: ClassVar[tuple[str, ...]] = ()
    provider_name: str = "base"

    def _unimplemented(self, operation: str) -> UnimplementedCapabilityError:
        return UnimplementedCapabilityError(
            self.capability.value, operation, provider=self.provider_name
        )


def verify_contract(port: type[CapabilityPort], instance: Any) -> Any:
    """
    Check that instance fully implements port.

    Raises:
        UnimplementedCapabilityError: If an operation is missing or is still the
            port's placeholder.
    """
    capability = port.capability.value
    provider = getattr(instance, "provider_name", None)

    if not isinstance(instance, port):
        raise UnimplementedCapabilityError(capability, "*", provider=provider)

    for operation in port.OPERATIONS:
        implementation = getattr(type(instance), operation, None)
        if not callable(implementation) or implementation is getattr(port, operation):
            raise UnimplementedCapabilityError(capability, operation, provider=provider)
        if getattr(implementation, "__isabstractmethod__", False):
            raise UnimplementedCapabilityError(capability, operation, provider=provider)

    return instance
