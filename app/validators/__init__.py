"""
Validators package.

Provides address, email and request payload validation.
"""

from app.validators.token import (
    MemeDropEntryCreate,
    ThemeUpdate,
    TokenCreate,
    parse_model,
)
from app.validators.unified import (
    validate_address_for_chain,
    validate_email,
    validate_evm_address,
    validate_solana_address,
)


__all__ = [
    "MemeDropEntryCreate",
    "ThemeUpdate",
    "TokenCreate",
    "parse_model",
    "validate_address_for_chain",
    "validate_email",
    "validate_evm_address",
    "validate_solana_address",
]
