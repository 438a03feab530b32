"""Identifier hashing for chat logs.

User ids and message text never appear in application logs. Ids are
hashed with a deployment salt; text is fingerprinted so a log line can be
matched to a stored message during review.

Both hashes accept any str, including text with lone surrogates, which
JSON request bodies can carry as escapes like "\\ud800".
"""
import hashlib
import logging
from typing import Optional

logger = logging.getLogger(__name__)

MIN_SALT_LENGTH = 32

# Set from PII_HASH_SALT by the service handlers
_salt: Optional[str] = None


def _sha256(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8", "surrogatepass")).hexdigest()


def configure_pii_salt(salt: str) -> None:
    """Set the salt used by hash_pii(). Call once at startup.

    Raises:
        ValueError: If salt is shorter than MIN_SALT_LENGTH
    """
    global _salt
    if not salt or len(salt) < MIN_SALT_LENGTH:
        logger.critical(
            "PII_SALT_REJECTED",
            extra={"salt_length": len(salt or ""), "min_length": MIN_SALT_LENGTH}
        )
        raise ValueError(f"PII salt must be at least {MIN_SALT_LENGTH} characters")

    _salt = salt
    logger.info("PII_SALT_CONFIGURED", extra={"salt_length": len(salt)})


def hash_pii(value: str) -> str:
    """Salted SHA-256 of a user or counselor id, as 64 hex chars.

    Raises:
        RuntimeError: If configure_pii_salt() has not been called
    """
    if _salt is None:
        raise RuntimeError("PII salt not configured. Call configure_pii_salt() first.")
    return _sha256(_salt + value)


def hash_text_for_audit(text: str) -> str:
    """Unsalted fingerprint of message text."""
    return _sha256(text)
