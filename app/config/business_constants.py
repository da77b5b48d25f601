"""
Business logic constants for MemeMarketer.

Central location for business rules shared by the server and the client
workflow. This module has no project imports so it can be used anywhere
without circular dependencies.
"""

from decimal import Decimal

# Flat fee for one token page, paid in SOL
DEFAULT_PAYMENT_AMOUNT_SOL = Decimal("0.11")

# Added to the fee when checking the balance so the network fee is covered
DEFAULT_FEE_BUFFER_SOL = Decimal("0.001")

# Platform wallet receiving token page payments
DEFAULT_PAYMENT_RECIPIENT = "5xDHKXERdpPGoY3bofLcjc4rRrMy22qRem588PgdR2RP"

LAMPORTS_PER_SOL = 1_000_000_000

# Token record rules
MIN_TOKEN_NAME_LENGTH = 2
MIN_TOKEN_ADDRESS_LENGTH = 8
MAX_CHAIN_LENGTH = 32

# Page customization values; the first entry of each tuple is the default
THEMES = ("dark", "light", "rainbow", "matrix")
BUTTON_STYLES = ("rounded", "pixel", "glow")
FONT_STYLES = ("sans", "comic", "pixel", "futuristic")

DEFAULT_THEME = THEMES[0]
DEFAULT_BUTTON_STYLE = BUTTON_STYLES[0]
DEFAULT_FONT_STYLE = FONT_STYLES[0]

# Chains a token page can be created for
SUPPORTED_CHAINS = ("solana", "ethereum", "base", "bnb", "polygon")
EVM_CHAINS = ("ethereum", "base", "bnb", "polygon")

CHAIN_SYMBOLS = {
    "solana": "SOL",
    "ethereum": "ETH",
    "base": "ETH",
    "bnb": "BNB",
    "polygon": "MATIC",
}
