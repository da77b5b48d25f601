"""Unified validators shared by the server, the page renderer and the client."""
import re

from eth_utils import is_address
from solders.pubkey import Pubkey

from app.config.business_constants import EVM_CHAINS


SOLANA_ADDRESS_PATTERN = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def validate_solana_address(address: str) -> tuple[bool, str | None]:
    """
    Validate a Solana public key (base58, 32 bytes).

    Args:
        address: Address to validate

    Returns:
        Tuple of (is_valid, error_message)

    Examples:
        >>> validate_solana_address("So11111111111111111111111111111111111111112")
        (True, None)
        >>> validate_solana_address("0x1234")
        (False, 'Invalid Solana address format')
    """
    if not address or not isinstance(address, str):
        return False, "Address is empty"

    address = address.strip()
    if not SOLANA_ADDRESS_PATTERN.match(address):
        return False, "Invalid Solana address format"

    try:
        Pubkey.from_string(address)
    except ValueError:
        return False, "Invalid Solana address format"
    return True, None


def validate_evm_address(address: str) -> tuple[bool, str | None]:
    """
    Validate an EVM address (0x + 40 hex, checksum checked when mixed case).

    Examples:
        >>> validate_evm_address("0x742d35cc6634c0532925a3b844bc9e7595f0beb0")
        (True, None)
        >>> validate_evm_address("invalid")
        (False, 'Invalid EVM address format')
    """
    if not address or not isinstance(address, str):
        return False, "Address is empty"

    if not is_address(address.strip()):
        return False, "Invalid EVM address format"
    return True, None


def validate_address_for_chain(address: str, chain: str) -> tuple[bool, str | None]:
    """
    Validate a token address against its chain's address format.

    Args:
        address: Token address
        chain: Lowercase chain id

    Returns:
        Tuple of (is_valid, error_message)
    """
    chain = (chain or "").lower()
    if chain == "solana":
        return validate_solana_address(address)
    if chain in EVM_CHAINS:
        return validate_evm_address(address)
    return False, f"Unsupported chain: {chain or 'unknown'}"


def validate_email(email: str) -> tuple[bool, str | None]:
    """
    Validate email address.

    Examples:
        >>> validate_email("user@example.com")
        (True, None)
        >>> validate_email("invalid")
        (False, 'Invalid email format')
    """
    if not email or not isinstance(email, str):
        return False, "Email is empty"

    if not EMAIL_PATTERN.match(email.strip()):
        return False, "Invalid email format"
    return True, None
