"""
Page Templates Module
Contains HTML templates and formatting functions for token pages
"""

from html import escape

from app.services.page_renderer import PageLink, TokenPage


SITE_NAME = "MemeMarketer"

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{title}</title>
<meta name="description" content="{description}">
<meta property="og:title" content="{title}">
<meta property="og:description" content="{description}">
<meta property="og:url" content="{page_url}">
{og_image}
</head>
<body class="theme-{theme} buttons-{button_style} font-{font_style}">
<main class="token-page">
<section class="identity">
{logo}
<h1 class="token-name">{token_name}</h1>
<span class="chain-badge">{chain_label}</span>
<div class="token-address">
<code id="token-address">{token_address}</code>
<button class="btn" data-copy="{token_address}">Copy address</button>
</div>
<p class="views">{view_count} views</p>
</section>
<section class="trade">
<h2>Trade {token_name}</h2>
{dex_block}
</section>
<section class="share">
<h2>Share</h2>
<ul class="share-links">
{share_links}
</ul>
<button class="btn" data-copy="{page_url}">Copy page link</button>
</section>
</main>
{copy_script}
</body>
</html>
"""

NOT_FOUND_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Token Not Found - {site}</title>
</head>
<body class="theme-dark">
<main class="not-found">
<h1>Token Not Found</h1>
<p>The token {token_name} doesn't exist or has been removed.</p>
<a class="btn" href="/">Create a token page</a>
</main>
</body>
</html>
"""

UNAVAILABLE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Temporarily Unavailable - {site}</title>
</head>
<body class="theme-dark">
<main class="unavailable">
<h1>Temporarily Unavailable</h1>
<p>We could not load this token page. Please try again in a moment.</p>
</main>
</body>
</html>
"""

INVALID_ADDRESS_TEMPLATE = (
    '<p class="invalid-address">Invalid address for this chain ({chain}): '
    "{error}. Trading links are disabled.</p>"
)

COPY_SCRIPT = """<script>
document.querySelectorAll("[data-copy]").forEach(function (button) {
  button.addEventListener("click", function () {
    navigator.clipboard.writeText(button.dataset.copy);
    button.textContent = "Copied!";
  });
});
</script>"""


def _format_links(links: list[PageLink], css_class: str) -> str:
    return "\n".join(
        f'<li><a class="btn {css_class}" href="{escape(link.url)}" '
        f'target="_blank" rel="noopener noreferrer">{escape(link.label)}</a></li>'
        for link in links
    )


def format_dex_block(page: TokenPage) -> str:
    """
    Format the trading section.

    Args:
        page: Token page view model

    Returns:
        DEX link list, or the invalid-address notice when the address does
        not match the chain
    """
    if not page.address_valid:
        return INVALID_ADDRESS_TEMPLATE.format(
            chain=escape(page.chain),
            error=escape(page.address_error or "unrecognized format"),
        )
    return f'<ul class="dex-links">\n{_format_links(page.dex_links, "dex-link")}\n</ul>'


def render_token_page(page: TokenPage) -> str:
    """Render the full HTML page for a token."""
    name = escape(page.token_name)
    logo = (
        f'<img class="logo" src="{escape(page.logo_url)}" alt="{name} logo">'
        if page.logo_url
        else '<div class="logo logo-placeholder">🚀</div>'
    )
    og_image = (
        f'<meta property="og:image" content="{escape(page.logo_url)}">' if page.logo_url else ""
    )

    return PAGE_TEMPLATE.format(
        title=f"{name} - {SITE_NAME}",
        description=f"Trade and showcase {name} meme coin with {SITE_NAME}",
        page_url=escape(page.page_url),
        og_image=og_image,
        theme=escape(page.theme),
        button_style=escape(page.button_style),
        font_style=escape(page.font_style),
        logo=logo,
        token_name=name,
        chain_label=f"{escape(page.chain.title())} ({escape(page.chain_symbol)})",
        token_address=escape(page.token_address),
        view_count=page.view_count,
        dex_block=format_dex_block(page),
        share_links=_format_links(page.share_links, "share-link"),
        copy_script=COPY_SCRIPT,
    )


def render_not_found_page(token_name: str) -> str:
    """Render the not-found page with a link back to the creation flow."""
    return NOT_FOUND_TEMPLATE.format(site=SITE_NAME, token_name=escape(token_name))


def render_unavailable_page() -> str:
    """Render the page shown while the database is unreachable."""
    return UNAVAILABLE_TEMPLATE.format(site=SITE_NAME)
