"""
Puerto (Interface) para proveedores de síntesis de voz (TTS).

Define el contrato que deben cumplir todos los adaptadores de voz
para integrarse con el dominio de manera desacoplada.
"""

from dataclasses import dataclass
from typing import Optional, Union

from .base import Capability, CapabilityPort

AudioFile = Union[bytes, tuple]  # raw bytes or (filename, bytes[, content_type])


@dataclass
class SynthesisResult:
    """
    Audio sintetizado.

    duration is None when the provider does not report it; callers treat
    None as unknown, not as zero.
    """
    audio_buffer: bytes
    content_type: str
    duration: Optional[float] = None


@dataclass
class VoiceInfo:
    """Metadata de una voz disponible."""
    id: str
    name: str
    language: str = "en"
    preview_url: Optional[str] = None
    category: Optional[str] = None
    description: str = ""


@dataclass
class ClonedVoice:
    voice_id: str
    name: str


class VoicePort(CapabilityPort):
    """
    Puerto para proveedores de Text-to-Speech.

    Implementaciones: ElevenLabsTTSAdapter, MockVoiceAdapter
    """

    capability = Capability.VOICE
    OPERATIONS = ("synthesize", "get_voices", "clone_voice")

    async def synthesize(
        self,
        text: str,
        voice_id: Optional[str] = None,
        model: Optional[str] = None,
        output_format: Optional[str] = None,
    ) -> SynthesisResult:
        """
        Sintetiza texto a audio.

        Args:
            text: Texto a sintetizar
            voice_id: Voz (default del proveedor si es None)
            model: Modelo de síntesis
            output_format: Formato de salida específico del proveedor

        Returns:
            SynthesisResult normalizado

        Raises:
            ProviderRequestError: Si falla la síntesis
        """
        raise self._unimplemented("synthesize")

    async def get_voices(self) -> list[VoiceInfo]:
        """Obtiene lista de voces disponibles."""
        raise self._unimplemented("get_voices")

    async def clone_voice(
        self,
        name: str,
        audio_files: list[AudioFile],
        description: str = "",
    ) -> ClonedVoice:
        """
        Clona una voz a partir de muestras de audio.

        Args:
            name: Nombre de la nueva voz
            audio_files: Muestras (bytes o tuplas (filename, bytes[, content_type]))
            description: Descripción opcional
        """
        raise self._unimplemented("clone_voice")
