import datetime
import math
from dataclasses import dataclass

from .exceptions import InvalidPeriod, InvalidTime
from .hotp import MAX_COUNTER
from .otp import Factor, TimeLike


@dataclass(frozen=True)
class Timer(Factor):
    """
    Moving factor for time-based OTP (RFC 6238).

    The period stays constant and divides the number of seconds elapsed since
    the Unix epoch. No upper bound is placed on it.
    """

    period: float = 30

    def validate(self) -> None:
        # bool is an int, but never a meaningful number of seconds
        if isinstance(self.period, bool) or not isinstance(self.period, (int, float)):
            raise InvalidPeriod("period must be a number of seconds")
        if not (math.isfinite(self.period) and self.period > 0):
            raise InvalidPeriod("period must be a positive number of seconds")

    def counter_value(self, for_time: TimeLike) -> int:
        """
        Returns the number of whole periods elapsed between the epoch and ``for_time``.

        :param for_time: seconds since the Unix epoch, or a datetime
        """
        if isinstance(for_time, datetime.datetime):
            for_time = for_time.timestamp()
        try:
            finite = math.isfinite(for_time)
        except OverflowError:
            finite = False
        if not (finite and for_time >= 0):
            raise InvalidTime("time must be a finite number of seconds since the Unix epoch")
        self.validate()
        counter = int(for_time // self.period)
        if counter > MAX_COUNTER:
            raise InvalidTime("time is too far in the future for a 64-bit counter")
        return counter
