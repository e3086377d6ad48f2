"""
Outbound adapters - one module per external provider, plus mocks.

Callers obtain instances through callkit.infrastructure.adapter_factory;
nothing outside the factory imports these classes directly.
"""
