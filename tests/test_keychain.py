"""Tests for the in-memory Keychain."""

import pytest

from onetimepassword import Algorithm, Counter, Generator, Keychain, PersistentToken, Timer, Token, TokenStore
from onetimepassword.exceptions import KeychainError, UrlGenerationFailure


@pytest.fixture
def keychain():
    return Keychain()


@pytest.fixture
def token():
    generator = Generator(factor=Counter(111), secret=b"12345678901234567890", algorithm=Algorithm.SHA256, digits=8)
    return Token(name="Test Name", issuer="Test Issuer", generator=generator)


@pytest.fixture
def other_token():
    generator = Generator(factor=Timer(123), secret=b"09876543210987654321", algorithm=Algorithm.SHA512, digits=7)
    return Token(name="Other Name", issuer="Other Issuer", generator=generator)


class TestKeychain:
    """Test the token store contract."""

    def test_is_token_store(self, keychain):
        """Keychain implements TokenStore."""
        assert isinstance(keychain, TokenStore)

    def test_add(self, keychain, token):
        """Added tokens can be found by identifier."""
        saved = keychain.add(token)
        assert saved.token == token
        assert isinstance(saved.identifier, bytes)

        found = keychain.persistent_token(saved.identifier)
        assert found == saved
        assert found.token == token

    def test_unique_identifiers(self, keychain, token):
        """Adding the same token twice creates two entries."""
        first = keychain.add(token)
        second = keychain.add(token)
        assert first != second
        assert keychain.all_persistent_tokens() == {first, second}

    def test_missing(self, keychain):
        """Unknown identifiers are not found."""
        assert keychain.persistent_token(b"missing") is None

    def test_all(self, keychain, token, other_token):
        """All entries are listed."""
        assert keychain.all_persistent_tokens() == set()
        saved = keychain.add(token)
        other = keychain.add(other_token)
        entries = keychain.all_persistent_tokens()
        assert entries == {saved, other}
        assert {entry.token for entry in entries} == {token, other_token}

    def test_update(self, keychain, token, other_token):
        """Updating keeps the identifier and replaces the value."""
        saved = keychain.add(token)
        updated = keychain.update(saved, other_token)
        assert updated.identifier == saved.identifier
        assert updated.token == other_token
        assert keychain.persistent_token(saved.identifier).token == other_token

    def test_update_counter(self, keychain, token):
        """Advancing a counter token is persisted."""
        saved = keychain.add(token)
        keychain.update(saved, saved.token.updated())
        assert keychain.persistent_token(saved.identifier).token.generator.factor == Counter(112)

    def test_update_missing(self, keychain, token):
        """Updating an unknown entry fails."""
        with pytest.raises(KeychainError):
            keychain.update(PersistentToken(token=token, identifier=b"missing"), token)

    def test_delete(self, keychain, token, other_token):
        """Deleted entries are gone, others remain."""
        saved = keychain.add(token)
        other = keychain.add(other_token)
        keychain.delete(saved)
        assert keychain.persistent_token(saved.identifier) is None
        assert keychain.all_persistent_tokens() == {other}

    def test_delete_twice(self, keychain, token):
        """Deleting an already deleted entry fails."""
        saved = keychain.add(token)
        keychain.delete(saved)
        with pytest.raises(KeychainError):
            keychain.delete(saved)

    def test_independent_instances(self, token):
        """Keychains do not share entries."""
        saved = Keychain().add(token)
        assert Keychain().persistent_token(saved.identifier) is None

    @pytest.mark.parametrize("period", [0.5, 1.5])
    def test_add_unserializable(self, keychain, token, period):
        """Tokens that cannot be written as a URI are never stored."""
        saved = keychain.add(token)
        fractional = Token(name="fractional", generator=Generator(factor=Timer(period), secret=b"x"))
        with pytest.raises(UrlGenerationFailure):
            keychain.add(fractional)
        assert keychain.all_persistent_tokens() == {saved}

    def test_update_unserializable(self, keychain, token):
        """A failed update leaves the stored value untouched."""
        saved = keychain.add(token)
        with pytest.raises(UrlGenerationFailure):
            keychain.update(saved, Token(generator=Generator(factor=Timer(0.5), secret=b"x")))
        assert keychain.persistent_token(saved.identifier).token == token
