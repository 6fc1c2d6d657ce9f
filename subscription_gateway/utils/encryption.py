"""
Encryption utilities for gateway secrets (client secrets, API keys).

Uses Fernet symmetric encryption from the cryptography library.

The passphrase is GATEWAY_ENCRYPTION_KEY from core.config; the default only
exists so local development works out of the box.
"""
import base64
import logging
from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from subscription_gateway.core import config

logger = logging.getLogger(__name__)

# Fixed salt for key derivation (use a per-installation salt in production)
SALT = b"subscription_gateway_salt_v1"


def get_encryption_key() -> bytes:
    """
    Derive the Fernet key from the configured passphrase.

    Returns:
        32-byte urlsafe base64 Fernet key
    """
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=SALT,
        iterations=100000,
    )
    return base64.urlsafe_b64encode(kdf.derive(config.GATEWAY_ENCRYPTION_KEY.encode()))


def encrypt_value(value: str) -> str:
    """
    Encrypt a single string value.

    Args:
        value: Plain text

    Returns:
        Fernet token (base64 text); empty input stays empty
    """
    if not value:
        return ""

    fernet = Fernet(get_encryption_key())
    return fernet.encrypt(value.encode()).decode()


def decrypt_value(encrypted_value: str) -> str:
    """
    Decrypt a value produced by encrypt_value.

    A token that cannot be decrypted (key rotated, value edited by hand)
    yields an empty string so the gateway reports it as not configured.
    """
    if not encrypted_value:
        return ""

    try:
        fernet = Fernet(get_encryption_key())
        return fernet.decrypt(encrypted_value.encode()).decode()
    except InvalidToken:
        logger.warning("Could not decrypt stored secret; was GATEWAY_ENCRYPTION_KEY changed?")
        return ""
