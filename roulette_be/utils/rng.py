"""
Deterministic randomness derived from an opaque seed.

The seed is hashed with SHA-256 and the digest keys a ChaCha20 keystream
(zero nonce, block counter 0). The same seed always produces the same draw.
"""
import hashlib
import logging
import secrets
from typing import Callable, Optional

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms

from roulette_be.exceptions import RandomnessUnavailableException
from roulette_be.utils.roulette_helper import ROULETTE_NUMBERS

logger = logging.getLogger(__name__)

KEY_SIZE = 32
# Initial block counter and nonce packed into the 16 bytes cryptography expects
_ZERO_NONCE = b"\x00" * 16

SeedProvider = Callable[[], Optional[bytes]]


class Prng:
    """ChaCha20 keystream reader."""

    def __init__(self, seed: bytes):
        self._keystream = self._new_keystream(hashlib.sha256(seed).digest())

    @classmethod
    def from_key(cls, key: bytes) -> "Prng":
        if len(key) != KEY_SIZE:
            raise ValueError(f"ChaCha20 key must be {KEY_SIZE} bytes, got {len(key)}")
        prng = cls.__new__(cls)
        prng._keystream = cls._new_keystream(key)
        return prng

    @staticmethod
    def _new_keystream(key: bytes):
        cipher = Cipher(algorithms.ChaCha20(key, _ZERO_NONCE), mode=None)
        return cipher.encryptor()

    def fill_bytes(self, size: int) -> bytes:
        # Encrypting zeros yields the raw keystream
        return self._keystream.update(b"\x00" * size)

    def rand_bytes(self) -> bytes:
        return self.fill_bytes(32)

    def next_u32(self) -> int:
        return int.from_bytes(self.fill_bytes(4), "little")

    def next_u64(self) -> int:
        return int.from_bytes(self.fill_bytes(8), "little")


def seed_to_u32(seed: Optional[bytes]) -> int:
    if not seed:
        raise RandomnessUnavailableException(details={"reason": "empty seed"})
    return Prng(seed).next_u32()


def draw_number_from_seed(seed: Optional[bytes]) -> int:
    """Map a seed onto a board number in 0-36."""
    number = seed_to_u32(seed) % len(ROULETTE_NUMBERS)
    logger.debug(f"Derived draw {number} from {len(seed)}-byte seed")
    return number


def obtain_seed(seed_provider: Optional[SeedProvider]) -> bytes:
    """Ask the provider for a seed, failing if it cannot supply one."""
    if seed_provider is None:
        raise RandomnessUnavailableException(details={"reason": "no seed provider configured"})
    seed = seed_provider()
    if not seed:
        raise RandomnessUnavailableException(details={"reason": "seed provider returned no seed"})
    return bytes(seed)


def system_seed_provider() -> bytes:
    """Fresh 32-byte seed from the operating system CSPRNG."""
    return secrets.token_bytes(KEY_SIZE)


def fixed_seed_provider(seed: bytes) -> SeedProvider:
    """Provider that always hands back ``seed`` (replaying a recorded settlement)."""
    def _provider():
        return seed
    return _provider
