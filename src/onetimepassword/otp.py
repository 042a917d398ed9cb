import datetime
import enum
import hashlib
import struct
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional, Union

from .crypto import HMACProvider, hmac_digest
from .exceptions import InvalidDigits

TimeLike = Union[int, float, datetime.datetime]

STEAM_CHARS = "23456789BCDFGHJKMNPQRTVWXY"


class Factor(object):
    """
    Base class for moving factors. A factor turns a point in time into the
    counter value fed to the HMAC.
    """

    def counter_value(self, for_time: TimeLike) -> int:
        raise NotImplementedError

    def successor(self) -> "Factor":
        return self

    def validate(self) -> None:
        pass


class Algorithm(enum.Enum):
    """
    Hash function used to compute the HMAC. The value is the spelling used in otpauth URIs.
    """

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"

    @property
    def digest(self) -> Callable[..., Any]:
        return {
            Algorithm.SHA1: hashlib.sha1,
            Algorithm.SHA256: hashlib.sha256,
            Algorithm.SHA512: hashlib.sha512,
        }[self]

    @property
    def digest_size(self) -> int:
        return self.digest().digest_size


class Representation(enum.Enum):
    """
    The characters used to render a truncated HMAC value as a password.
    """

    NUMERIC = "numeric"
    STEAMGUARD = "steamguard"

    def accepts(self, digits: int) -> bool:
        if self is Representation.STEAMGUARD:
            # Steam Guard codes use 5 characters with a larger base
            return digits == 5
        # RFC 4226 section 5.3: 6-digit codes at a minimum, possibly 7 and 8
        return 6 <= digits <= 8

    def stringify(self, code: int, digits: int) -> str:
        if self is Representation.STEAMGUARD:
            chars = []
            for _ in range(digits):
                code, index = divmod(code, len(STEAM_CHARS))
                chars.append(STEAM_CHARS[index])
            return "".join(chars)
        return str(code % 10**digits).zfill(digits)


@dataclass(frozen=True)
class Generator(object):
    """
    All of the parameters needed to generate a one-time password.

    Generators are immutable and always valid: the constructor raises
    :class:`InvalidDigits` or :class:`InvalidPeriod` instead of returning a
    generator that could not produce a password.

    The secret is held as plain bytes for as long as the generator lives; it is
    not wiped from memory after use.
    """

    factor: Factor
    secret: bytes = field(repr=False)
    algorithm: Algorithm = Algorithm.SHA1
    digits: int = 6
    representation: Representation = Representation.NUMERIC

    def __post_init__(self) -> None:
        self.factor.validate()
        if isinstance(self.digits, bool) or not isinstance(self.digits, int):
            raise InvalidDigits("digits must be an integer")
        if not self.representation.accepts(self.digits):
            raise InvalidDigits(
                "{} digits are not valid for the {} representation".format(self.digits, self.representation.value)
            )

    def password(self, for_time: TimeLike, hmac_provider: Optional[HMACProvider] = None) -> str:
        """
        Generates the password for the given point in time.

        Counter-based generators ignore the time.

        :param for_time: seconds since the Unix epoch, or a datetime
        :param hmac_provider: HMAC backend, defaults to :func:`hmac_digest`
        :returns: password
        """
        counter = self.factor.counter_value(for_time)
        provider = hmac_provider if hmac_provider is not None else hmac_digest
        hmac_hash = provider(self.algorithm, self.secret, self.int_to_bytestring(counter))

        offset = hmac_hash[-1] & 0xF
        if len(hmac_hash) < offset + 4:
            raise ValueError("digest of {} bytes is too short for dynamic truncation".format(len(hmac_hash)))
        code = struct.unpack(">I", hmac_hash[offset : offset + 4])[0] & 0x7FFFFFFF
        return self.representation.stringify(code, self.digits)

    at = password

    def successor(self) -> "Generator":
        """
        Returns a generator configured to produce the password which follows
        the one produced by this generator. Timer-based generators are
        returned unchanged.
        """
        factor = self.factor.successor()
        if factor is self.factor:
            return self
        return replace(self, factor=factor)

    @staticmethod
    def int_to_bytestring(i: int) -> bytes:
        """
        Turns the counter into the 8-byte big-endian string fed to the HMAC.
        """
        return struct.pack(">Q", i)
