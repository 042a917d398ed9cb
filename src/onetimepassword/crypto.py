import hmac
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .otp import Algorithm


class HMACProvider(Protocol):
    """
    Anything that can compute ``HMAC(algorithm, key, message)``.

    Implementations must be deterministic and return exactly
    ``algorithm.digest_size`` bytes (20, 32 or 64 for SHA1, SHA256 and SHA512).
    """

    def __call__(self, algorithm: "Algorithm", key: bytes, message: bytes) -> bytes:
        ...


def hmac_digest(algorithm: "Algorithm", key: bytes, message: bytes) -> bytes:
    """
    Default HMAC backend, built on the standard library ``hmac`` and ``hashlib`` modules.

    :param algorithm: the hash function to use
    :param key: the shared secret
    :param message: usually the 8-byte big-endian moving factor
    :returns: raw HMAC digest
    """
    return hmac.new(key, message, algorithm.digest).digest()
