import time
from dataclasses import dataclass, field, replace
from typing import Optional

from . import utils
from .exceptions import GeneratorError
from .otp import Generator


@dataclass(frozen=True)
class Token(object):
    """
    A password generator together with the information identifying the account it belongs to.

    :param name: account name, often an email address or username
    :param issuer: the provider or service which issued the token
    :param generator: the password generator holding the secret, algorithm, etc.
    """

    generator: Generator
    name: str = ""
    issuer: str = ""

    @property
    def current_password(self) -> Optional[str]:
        """
        The password for the current time, or None if one cannot be generated.
        """
        try:
            return self.generator.password(time.time())
        except GeneratorError:
            return None

    def updated(self) -> "Token":
        """
        Returns a token configured to generate the next password.
        """
        return replace(self, generator=self.generator.successor())

    def to_uri(self) -> str:
        """
        Serializes the token to an otpauth URI. The secret is not included.
        """
        return utils.build_uri(
            name=self.name,
            issuer=self.issuer,
            factor=self.generator.factor,
            algorithm=self.generator.algorithm,
            digits=self.generator.digits,
            representation=self.generator.representation,
        )

    @classmethod
    def from_uri(cls, uri: str, secret: Optional[bytes] = None) -> "Token":
        """
        Parses an otpauth URI. See :func:`onetimepassword.utils.token_from_uri`.
        """
        return utils.token_from_uri(uri, secret=secret)


@dataclass(frozen=True)
class PersistentToken(object):
    """
    A token saved in a token store, which assigned it a unique ``identifier``.

    Two persistent tokens are the same entry if and only if their identifiers
    match, whatever their token values.
    """

    token: Token = field(compare=False)
    identifier: bytes
