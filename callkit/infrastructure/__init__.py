"""Infrastructure layer exports."""

from .adapter_factory import (
    AdapterBundle,
    DEFAULT_PROVIDERS,
    create_adapter_bundle,
    get_adapter_bundle,
    get_adapter_bundle_async,
    get_adapter_info,
    reset_adapter_bundle,
)
from .provider_registry import ProviderRegistry, get_provider_registry

__all__ = [
    "AdapterBundle",
    "DEFAULT_PROVIDERS",
    "create_adapter_bundle",
    "get_adapter_bundle",
    "get_adapter_bundle_async",
    "get_adapter_info",
    "reset_adapter_bundle",
    "ProviderRegistry",
    "get_provider_registry",
]
