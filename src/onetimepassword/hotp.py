from dataclasses import dataclass

from .exceptions import InvalidCounter
from .otp import Factor, TimeLike

MAX_COUNTER = 2**64 - 1


@dataclass(frozen=True)
class Counter(Factor):
    """
    Moving factor for HMAC-based OTP (RFC 4226).

    The counter should be advanced after each use of the password to stay in
    sync with the server.
    """

    value: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidCounter("counter must be an integer")
        if not 0 <= self.value <= MAX_COUNTER:
            raise InvalidCounter("counter must fit in an unsigned 64-bit integer")

    def counter_value(self, for_time: TimeLike) -> int:
        return self.value

    def successor(self) -> "Counter":
        # wraps around at 2**64, like the unsigned counter it stands for
        return Counter((self.value + 1) & MAX_COUNTER)
