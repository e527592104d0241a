"""Symmetric encryption for temporary credentials (Fernet).

The configured key is exactly 32 characters; its bytes are used directly
as the Fernet key material, so the same configured value always decrypts
what it encrypted.
"""

import base64

from cryptography.fernet import Fernet, InvalidToken

from portal.domain.exceptions import ConfigurationException

KEY_LENGTH = 32
DECRYPTION_ERROR_MSG = "Failed to decrypt temporary credential - invalid or corrupted data"


class FernetSecretCipher:
    """Encrypt/decrypt temporary secrets with a key supplied by configuration."""

    def __init__(self, key: str) -> None:
        self._fernet = Fernet(self._derive_fernet_key(key))

    @staticmethod
    def _derive_fernet_key(key: str) -> bytes:
        """Validate the configured key and encode it as a Fernet key.

        Raises:
            ConfigurationException: If the key is not exactly 32 single-byte characters.
        """
        if not isinstance(key, str) or len(key) != KEY_LENGTH:
            raise ConfigurationException(
                f"TEMP_PASSWORD_ENCRYPTION_KEY must be exactly {KEY_LENGTH} characters long",
                setting="temp_password_encryption_key",
            )
        raw = key.encode("utf-8")
        if len(raw) != KEY_LENGTH:
            raise ConfigurationException(
                "TEMP_PASSWORD_ENCRYPTION_KEY must use ASCII characters only",
                setting="temp_password_encryption_key",
            )
        return base64.urlsafe_b64encode(raw)

    def encrypt(self, plaintext: str) -> str:
        """Encrypt plaintext to a string safe for storage."""
        return self._fernet.encrypt(plaintext.encode("utf-8")).decode("ascii")

    def decrypt(self, token: str) -> str:
        """Decrypt a stored token back to plaintext.

        Raises:
            ValueError: If the token is invalid or was encrypted with another key.
        """
        try:
            return self._fernet.decrypt(token.encode("ascii")).decode("utf-8")
        except InvalidToken as e:
            raise ValueError(DECRYPTION_ERROR_MSG) from e
