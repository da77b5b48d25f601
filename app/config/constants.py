"""
Application constants.

Centralized constants for the application.
"""

# ========================================================================
# DATABASE CONSTANTS
# ========================================================================

DB_OPERATION_TIMEOUT = 15.0  # Token insert timeout before degraded mode

# ========================================================================
# BLOCKCHAIN CONSTANTS
# ========================================================================

SOLANA_RPC_TIMEOUT = 30  # RPC provider HTTP timeout
SIGNING_TIMEOUT = 120.0  # Wallet sign-and-send timeout
CONFIRMATION_SLEEP_SECONDS = 0.5  # Poll interval while confirming a signature

# ========================================================================
# UPLOAD CONSTANTS
# ========================================================================

MAX_LOGO_SIZE_BYTES = 5 * 1024 * 1024  # 5MB
UPLOADS_URL_PREFIX = "/uploads"

# Accepted logo content types and their file signatures
ALLOWED_IMAGE_TYPES = {
    "image/jpeg": (b"\xff\xd8\xff",),
    "image/png": (b"\x89PNG\r\n\x1a\n",),
    "image/gif": (b"GIF87a", b"GIF89a"),
}

IMAGE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
}

# ========================================================================
# PAGE CONSTANTS
# ========================================================================

COIN_PAGE_PREFIX = "/coin"
SHARE_TEXT_TEMPLATE = "Check out my new meme coin {name}! 🚀"

# DEX terminals: URL template plus the slug each provider uses per chain.
# A provider without a slug for a chain is not shown for that chain.
DEX_PROVIDERS = {
    "DexScreener": {
        "url": "https://dexscreener.com/{chain}/{address}",
        "chains": {
            "solana": "solana",
            "ethereum": "ethereum",
            "base": "base",
            "bnb": "bsc",
            "polygon": "polygon",
        },
    },
    "BirdEye": {
        "url": "https://birdeye.so/token/{address}?chain={chain}",
        "chains": {
            "solana": "solana",
            "ethereum": "ethereum",
            "base": "base",
            "bnb": "bsc",
            "polygon": "polygon",
        },
    },
    "GeckoTerminal": {
        "url": "https://www.geckoterminal.com/{chain}/tokens/{address}",
        "chains": {
            "solana": "solana",
            "ethereum": "eth",
            "base": "base",
            "bnb": "bsc",
            "polygon": "polygon_pos",
        },
    },
    "GMGN": {
        "url": "https://gmgn.ai/{chain}/token/{address}",
        "chains": {
            "solana": "sol",
            "ethereum": "eth",
            "base": "base",
            "bnb": "bsc",
        },
    },
}

# Social share targets; {url} and {text} are URL-encoded before substitution
SOCIAL_PROVIDERS = {
    "Twitter": "https://twitter.com/intent/tweet?text={text}&url={url}",
    "Reddit": "https://reddit.com/submit?url={url}&title={text}",
    "Telegram": "https://t.me/share/url?url={url}&text={text}",
}

# ========================================================================
# MEMEDROP CONSTANTS
# ========================================================================

MEMEDROP_MASK_PREFIX = 6
MEMEDROP_MASK_SUFFIX = 4
