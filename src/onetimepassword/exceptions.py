class OTPError(ValueError):
    """
    Base class for every error raised by onetimepassword.
    """


# Generator construction and password computation


class GeneratorError(OTPError):
    pass


class InvalidTime(GeneratorError):
    """The requested time is before the Unix epoch, or is not a finite number."""


class InvalidPeriod(GeneratorError):
    """The timer period is not a positive number of seconds."""


class InvalidDigits(GeneratorError):
    """The number of digits is not accepted by the chosen representation."""


class InvalidCounter(GeneratorError):
    """The counter is not an unsigned 64-bit integer."""


# URI serialization


class SerializationError(OTPError):
    pass


class UrlGenerationFailure(SerializationError):
    pass


# URI deserialization


class DeserializationError(OTPError):
    pass


class InvalidURLScheme(DeserializationError):
    pass


class DuplicateQueryItem(DeserializationError):
    def __init__(self, name: str) -> None:
        super().__init__("query parameter {!r} appears more than once".format(name))
        self.name = name


class MissingFactor(DeserializationError):
    pass


class InvalidFactor(DeserializationError):
    def __init__(self, host: str) -> None:
        super().__init__("unsupported OTP type {!r}, must be hotp or totp".format(host))
        self.host = host


class InvalidCounterValue(DeserializationError):
    pass


class InvalidTimerPeriod(DeserializationError):
    pass


class InvalidAlgorithm(DeserializationError):
    pass


class MissingSecret(DeserializationError):
    pass


class InvalidSecret(DeserializationError):
    pass


class KeychainError(OTPError):
    """
    Raised by a token store when an entry cannot be found or written.
    """
