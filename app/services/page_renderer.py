"""
Page renderer.

Builds the view model for a token page: identity block, DEX-terminal deep
links and social-share links. HTML is produced by web.messages.page_templates
from the TokenPage returned here.
"""

from dataclasses import dataclass, field
from urllib.parse import quote

from loguru import logger

from app.config.business_constants import CHAIN_SYMBOLS
from app.config.constants import (
    COIN_PAGE_PREFIX,
    DEX_PROVIDERS,
    SHARE_TEXT_TEMPLATE,
    SOCIAL_PROVIDERS,
)
from app.models.token import Token
from app.utils.security import mask_address
from app.validators.unified import validate_address_for_chain


@dataclass(frozen=True)
class PageLink:
    """Named outbound link."""

    label: str
    url: str


@dataclass
class TokenPage:
    """Everything a token page shows."""

    token_name: str
    token_address: str
    chain: str
    chain_symbol: str
    logo_url: str | None
    theme: str
    button_style: str
    font_style: str
    view_count: int
    page_url: str
    address_valid: bool
    address_error: str | None = None
    dex_links: list[PageLink] = field(default_factory=list)
    share_links: list[PageLink] = field(default_factory=list)


def page_path(token_name: str) -> str:
    """Deterministic page path derived from the token name."""
    return f"{COIN_PAGE_PREFIX}/{quote(token_name.lower(), safe='')}"


def build_dex_links(chain: str, address: str) -> list[PageLink]:
    """
    Build DEX-terminal links for a chain.

    Providers without a slug for the chain are omitted.

    Args:
        chain: Lowercase chain id
        address: Validated token address

    Returns:
        Links in provider order
    """
    links = []
    for label, provider in DEX_PROVIDERS.items():
        slug = provider["chains"].get(chain)
        if slug is None:
            continue
        url = provider["url"].format(chain=slug, address=quote(address, safe=""))
        links.append(PageLink(label=label, url=url))
    return links


def build_share_links(token_name: str, page_url: str) -> list[PageLink]:
    """Build social-share links pointing at the token page."""
    text = quote(SHARE_TEXT_TEMPLATE.format(name=token_name), safe="")
    url = quote(page_url, safe="")
    return [
        PageLink(label=label, url=template.format(url=url, text=text))
        for label, template in SOCIAL_PROVIDERS.items()
    ]


def build_token_page(token: Token, public_base_url: str) -> TokenPage:
    """
    Build the page view model for a persisted token.

    DEX links are only produced when the address matches the chain's
    address format; otherwise the page carries the validation error.

    Args:
        token: Persisted token record
        public_base_url: Public site origin used for share links

    Returns:
        TokenPage
    """
    chain = (token.chain or "").lower()
    page_url = f"{public_base_url.rstrip('/')}{page_path(token.token_name)}"

    is_valid, error = validate_address_for_chain(token.token_address, chain)
    if not is_valid:
        logger.warning(
            f"Token {token.token_name!r} has invalid {chain} address "
            f"{mask_address(token.token_address)}: {error}"
        )

    return TokenPage(
        token_name=token.token_name,
        token_address=token.token_address,
        chain=chain,
        chain_symbol=CHAIN_SYMBOLS.get(chain, chain.upper()),
        logo_url=token.logo_url,
        theme=token.theme,
        button_style=token.button_style,
        font_style=token.font_style,
        view_count=token.view_count or 0,
        page_url=page_url,
        address_valid=is_valid,
        address_error=error,
        dex_links=build_dex_links(chain, token.token_address) if is_valid else [],
        share_links=build_share_links(token.token_name, page_url),
    )
