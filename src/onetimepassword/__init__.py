from typing import Optional

from . import exceptions as exceptions
from .crypto import HMACProvider as HMACProvider
from .crypto import hmac_digest as hmac_digest
from .hotp import Counter as Counter
from .keychain import Keychain as Keychain
from .keychain import TokenStore as TokenStore
from .otp import Algorithm as Algorithm
from .otp import Factor as Factor
from .otp import Generator as Generator
from .otp import Representation as Representation
from .token import PersistentToken as PersistentToken
from .token import Token as Token
from .totp import Timer as Timer

# The URI looks like this, the secret is carried out of band:
# otpauth://totp/FooCorp:alice@example.com?algorithm=SHA1&digits=6&issuer=FooCorp&period=30


def parse_uri(uri: str, secret: Optional[bytes] = None) -> Token:
    """
    Parses the provisioning URI for a token; works for either TOTP or HOTP.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param uri: the hotp/totp URI to parse
    :param secret: raw secret, used instead of the URI's ``secret`` parameter
    :returns: Token
    """
    return Token.from_uri(uri, secret=secret)
