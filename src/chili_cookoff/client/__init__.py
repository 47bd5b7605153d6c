"""Client-side helpers: voter identity and an HTTP voting client."""

from .identity import DeviceCharacteristics, IdentityProvider, MemoryStorage
from .voting import VotingClient, VotingClientError

__all__ = [
    "DeviceCharacteristics",
    "IdentityProvider",
    "MemoryStorage",
    "VotingClient",
    "VotingClientError",
]
