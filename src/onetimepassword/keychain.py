import abc
import logging
import threading
import uuid
from typing import Dict, Optional, Set, Tuple

from .exceptions import KeychainError
from .token import PersistentToken, Token

log = logging.getLogger(__name__)


class TokenStore(abc.ABC):
    """
    Durable storage for tokens. Each saved token is assigned a unique
    identifier which can be used to recover it later.
    """

    @abc.abstractmethod
    def add(self, token: Token) -> PersistentToken:
        """
        Saves the token and returns the persistent token which contains it.
        """

    @abc.abstractmethod
    def persistent_token(self, identifier: bytes) -> Optional[PersistentToken]:
        """
        Finds the persistent token with the given identifier, or None if there is none.
        """

    @abc.abstractmethod
    def all_persistent_tokens(self) -> Set[PersistentToken]:
        pass

    @abc.abstractmethod
    def update(self, persistent_token: PersistentToken, token: Token) -> PersistentToken:
        """
        Replaces the stored token value, keeping the identifier.

        :raises KeychainError: no entry exists for the identifier
        """

    @abc.abstractmethod
    def delete(self, persistent_token: PersistentToken) -> None:
        """
        Deletes the entry. The identifier is no longer valid afterwards.

        :raises KeychainError: no entry exists for the identifier
        """


class Keychain(TokenStore):
    """
    In-memory token store.

    Each entry keeps the token's otpauth URI and its raw secret side by side;
    the secret is never embedded in the URI. Instances are independent of
    each other, create one and pass it to whoever needs it.
    """

    def __init__(self) -> None:
        self._items: Dict[bytes, Tuple[str, bytes]] = {}
        self._lock = threading.Lock()

    def add(self, token: Token) -> PersistentToken:
        item = self._item_for(token)
        identifier = uuid.uuid4().bytes
        with self._lock:
            self._items[identifier] = item
        log.debug("added token %r to keychain", token.name)
        return PersistentToken(token=token, identifier=identifier)

    def persistent_token(self, identifier: bytes) -> Optional[PersistentToken]:
        with self._lock:
            item = self._items.get(identifier)
        if item is None:
            return None
        return self._persistent_token_for(identifier, item)

    def all_persistent_tokens(self) -> Set[PersistentToken]:
        with self._lock:
            items = list(self._items.items())
        return {self._persistent_token_for(identifier, item) for identifier, item in items}

    def update(self, persistent_token: PersistentToken, token: Token) -> PersistentToken:
        item = self._item_for(token)
        identifier = persistent_token.identifier
        with self._lock:
            if identifier not in self._items:
                raise KeychainError("no keychain item for identifier {}".format(identifier.hex()))
            self._items[identifier] = item
        log.debug("updated token %r in keychain", token.name)
        return PersistentToken(token=token, identifier=identifier)

    def delete(self, persistent_token: PersistentToken) -> None:
        identifier = persistent_token.identifier
        with self._lock:
            if self._items.pop(identifier, None) is None:
                raise KeychainError("no keychain item for identifier {}".format(identifier.hex()))
        log.debug("deleted keychain item %s", identifier.hex())

    @staticmethod
    def _item_for(token: Token) -> Tuple[str, bytes]:
        return token.to_uri(), token.generator.secret

    @staticmethod
    def _persistent_token_for(identifier: bytes, item: Tuple[str, bytes]) -> PersistentToken:
        uri, secret = item
        return PersistentToken(token=Token.from_uri(uri, secret=secret), identifier=identifier)
