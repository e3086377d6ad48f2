"""
Puerto (Interface) para cache distribuido y rate limiting.

Abstrae Redis u otro almacén clave-valor. Las implementaciones nunca
lanzan excepciones: degradan a un valor neutro (fail-open).
"""

from abc import ABC, abstractmethod
from typing import Any


class CachePort(ABC):
    """
    Puerto para cache distribuido.

    Implementaciones: RedisCacheAdapter
    """

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Estado de conexión con el almacén."""
        pass

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """
        Obtiene valor del cache.

        Returns:
            Valor deserializado, o None si no existe, está corrupto o el
            almacén no está disponible
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """
        Establece valor en cache (serializado a JSON) con TTL en segundos.

        Returns:
            True si se escribió, False en caso contrario
        """
        pass

    @abstractmethod
    async def delete(self, key_or_pattern: str) -> bool:
        """
        Borra una clave exacta, o todas las que coincidan con un patrón glob
        (ej: "intel:*").
        """
        pass

    @abstractmethod
    async def rate_limit_increment(self, key: str, window_seconds: int) -> int | None:
        """
        Incrementa un contador atómicamente. El primer incremento fija la
        expiración; los siguientes no la reinician.

        Returns:
            Conteo tras el incremento, o None si el almacén no está disponible
        """
        pass

    @abstractmethod
    async def rate_limit_ttl(self, key: str) -> int:
        """Segundos restantes de la ventana, o -1 si se desconoce."""
        pass

    @abstractmethod
    async def close(self):
        """Cierra conexión a cache."""
        pass
