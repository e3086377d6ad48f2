"""callkit - pluggable adapters for telephony, voice, LLM and speech-to-text providers."""

__version__ = "0.1.0"
