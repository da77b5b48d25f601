"""
Security utilities for masking sensitive data in logs and public listings.

Provides functions to safely mask:
- Wallet and token addresses
- Transaction signatures
"""

from app.config.constants import MEMEDROP_MASK_PREFIX, MEMEDROP_MASK_SUFFIX


def mask_address(address: str | None) -> str:
    """
    Mask wallet address: first 6 and last 4 characters.

    Args:
        address: Address to mask

    Returns:
        Masked address

    Examples:
        >>> mask_address("So11111111111111111111111111111111111111112")
        'So1111...1112'
        >>> mask_address(None)
        '***'
        >>> mask_address("short")
        '***'
    """
    if not address or len(address) < MEMEDROP_MASK_PREFIX + MEMEDROP_MASK_SUFFIX:
        return "***"
    return f"{address[:MEMEDROP_MASK_PREFIX]}...{address[-MEMEDROP_MASK_SUFFIX:]}"


def mask_signature(signature: str | None) -> str:
    """
    Mask transaction signature for logging.

    Examples:
        >>> mask_signature("5" * 88)
        '5555555555...555555'
    """
    if not signature or len(signature) < 16:
        return "***"
    return f"{signature[:10]}...{signature[-6:]}"
