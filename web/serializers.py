"""
JSON serialization of models.

API responses use camelCase keys.
"""

from typing import Any

from app.models.memedrop_entry import MemeDropEntry
from app.models.token import Token


def token_to_dict(token: Token) -> dict[str, Any]:
    """Serialize a persisted token record."""
    return {
        "id": token.id,
        "tokenName": token.token_name,
        "tokenAddress": token.token_address,
        "chain": token.chain,
        "logoUrl": token.logo_url,
        "theme": token.theme,
        "buttonStyle": token.button_style,
        "fontStyle": token.font_style,
        "viewCount": token.view_count,
        "createdAt": token.created_at.isoformat() if token.created_at else None,
    }


def memedrop_entry_to_dict(entry: MemeDropEntry) -> dict[str, Any]:
    """Serialize a MemeDrop entry."""
    return {
        "id": entry.id,
        "walletAddress": entry.wallet_address,
        "tokenName": entry.token_name,
        "chain": entry.chain,
        "twitter": entry.twitter,
        "email": entry.email,
        "createdAt": entry.created_at.isoformat() if entry.created_at else None,
    }
