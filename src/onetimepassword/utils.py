import base64
import logging
import math
import re
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple
from urllib.parse import parse_qsl, quote, unquote, urlencode, urlsplit

from .exceptions import (
    DuplicateQueryItem,
    InvalidAlgorithm,
    InvalidCounterValue,
    InvalidDigits,
    InvalidFactor,
    InvalidSecret,
    InvalidTimerPeriod,
    InvalidURLScheme,
    MissingFactor,
    MissingSecret,
    UrlGenerationFailure,
)
from .hotp import MAX_COUNTER, Counter
from .otp import Algorithm, Factor, Generator, Representation
from .totp import Timer

if TYPE_CHECKING:
    from .token import Token

log = logging.getLogger(__name__)

DEFAULT_ALGORITHM = Algorithm.SHA1
DEFAULT_DIGITS = 6
DEFAULT_COUNTER = 0
DEFAULT_PERIOD = 30

OTPAUTH_SCHEME = "otpauth"
COUNTER_HOST = "hotp"
TIMER_HOST = "totp"
STEAM_ENCODER = "steam"

_UNSIGNED_RE = re.compile(r"[0-9]+")
_SIGNED_RE = re.compile(r"[+-]?[0-9]+")
_DECIMAL_RE = re.compile(r"[0-9]+(\.[0-9]+)?")


def build_uri(
    name: str,
    issuer: str,
    factor: Factor,
    algorithm: Algorithm,
    digits: int,
    representation: Representation = Representation.NUMERIC,
) -> str:
    """
    Returns the otpauth URI describing a token; works for either TOTP or HOTP.

    The secret is never part of the URI, it has to be distributed or stored
    separately. Parameters always appear in the same order, so the same token
    always yields the same URI.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param name: name of the account
    :param issuer: the name of the OTP issuer, may be empty
    :param factor: a :class:`Counter` (hotp) or :class:`Timer` (totp)
    :param algorithm: the algorithm used in the OTP generation
    :param digits: the length of the OTP generated code
    :param representation: Steam Guard tokens get an extra ``encoder=steam`` parameter
    :returns: otpauth uri
    """
    url_args: List[Tuple[str, str]] = [
        ("algorithm", algorithm.value),
        ("digits", str(digits)),
        ("issuer", issuer),
    ]
    if isinstance(factor, Timer):
        otp_type = TIMER_HOST
        # otpauth periods are whole seconds
        if factor.period < 1 or int(factor.period) != factor.period:
            raise UrlGenerationFailure("period {!r} is not a whole number of seconds".format(factor.period))
        url_args.append(("period", str(int(factor.period))))
    elif isinstance(factor, Counter):
        otp_type = COUNTER_HOST
        url_args.append(("counter", str(factor.value)))
    else:
        raise UrlGenerationFailure("unsupported moving factor {!r}".format(factor))

    if representation is Representation.STEAMGUARD:
        url_args.append(("encoder", STEAM_ENCODER))

    try:
        label = quote(name, safe="@:")
        query = urlencode(url_args).replace("+", "%20")
    except UnicodeEncodeError as exc:
        raise UrlGenerationFailure("token cannot be represented as a URI") from exc
    return "{0}://{1}/{2}?{3}".format(OTPAUTH_SCHEME, otp_type, label, query)


def byte_secret(secret: str) -> bytes:
    """
    Decodes a base32 secret. Padding is optional, as otpauth URIs omit it.
    """
    missing_padding = len(secret) % 8
    if missing_padding != 0:
        secret += "=" * (8 - missing_padding)
    try:
        return base64.b32decode(secret, casefold=True)
    except ValueError as exc:
        raise InvalidSecret("secret is not valid base32") from exc


def token_from_uri(uri: str, secret: Optional[bytes] = None) -> "Token":
    """
    Parses an otpauth URI into a :class:`Token`; works for either TOTP or HOTP.

    :param uri: the hotp/totp URI to parse
    :param secret: the raw secret, overrides any ``secret`` parameter in the URI
    :returns: Token
    :raises DeserializationError: the URI does not describe a valid token
    :raises GeneratorError: the described generator cannot exist
    """
    from .token import Token

    parsed_uri = urlsplit(uri)
    if parsed_uri.scheme != OTPAUTH_SCHEME:
        raise InvalidURLScheme("Not an otpauth URI")

    # each parameter may appear at most once
    query: Dict[str, str] = {}
    for key, value in parse_qsl(parsed_uri.query, keep_blank_values=True):
        if key in query:
            raise DuplicateQueryItem(key)
        query[key] = value

    factor = _parse_factor(parsed_uri.netloc, query)

    if "algorithm" in query:
        try:
            algorithm = Algorithm(query["algorithm"])
        except ValueError:
            raise InvalidAlgorithm("Invalid value for algorithm, must be SHA1, SHA256 or SHA512") from None
    else:
        algorithm = DEFAULT_ALGORITHM

    if "digits" in query:
        if not _SIGNED_RE.fullmatch(query["digits"]):
            raise InvalidDigits("digits must be an integer")
        digits = int(query["digits"])
    else:
        digits = DEFAULT_DIGITS

    if secret is None:
        if "secret" not in query:
            raise MissingSecret("No secret found in URI")
        secret = byte_secret(query["secret"])

    if query.get("encoder") == STEAM_ENCODER:
        representation = Representation.STEAMGUARD
    else:
        representation = Representation.NUMERIC

    generator = Generator(
        factor=factor, secret=secret, algorithm=algorithm, digits=digits, representation=representation
    )

    path = unquote(parsed_uri.path)
    full_name = path[1:] if path.startswith("/") else path

    if "issuer" in query:
        issuer = query["issuer"]
    elif ":" in full_name:
        issuer = full_name.split(":", 1)[0]
    else:
        issuer = ""

    name = full_name
    if issuer and full_name.startswith(issuer + ":"):
        name = full_name[len(issuer) + 1 :].strip()

    log.debug("parsed %s token %r issued by %r", parsed_uri.netloc, name, issuer)
    return Token(generator=generator, name=name, issuer=issuer)


def _parse_factor(host: str, query: Dict[str, str]) -> Factor:
    if not host:
        raise MissingFactor("otpauth URI has no OTP type")

    if host == COUNTER_HOST:
        value = query.get("counter")
        if value is None:
            return Counter(DEFAULT_COUNTER)
        if not _UNSIGNED_RE.fullmatch(value) or int(value) > MAX_COUNTER:
            raise InvalidCounterValue("counter must be an unsigned 64-bit integer")
        return Counter(int(value))

    if host == TIMER_HOST:
        value = query.get("period")
        if value is None:
            return Timer(DEFAULT_PERIOD)
        if not _DECIMAL_RE.fullmatch(value):
            raise InvalidTimerPeriod("period must be a number of seconds")
        period = float(value)
        if not (math.isfinite(period) and period > 0):
            raise InvalidTimerPeriod("period must be a positive number of seconds")
        return Timer(int(period) if period.is_integer() else period)

    raise InvalidFactor(host)
