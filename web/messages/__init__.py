"""
Web Messages Module
Contains HTML templates for token pages
"""

from web.messages.page_templates import (
    SITE_NAME,
    format_dex_block,
    render_not_found_page,
    render_token_page,
    render_unavailable_page,
)

__all__ = [
    "SITE_NAME",
    "format_dex_block",
    "render_not_found_page",
    "render_token_page",
    "render_unavailable_page",
]
