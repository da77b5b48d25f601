#!/usr/bin/env python3
"""
Create a token page from the command line.

Runs the same two-step flow as the website:
1. Pays the token page fee from a local Solana keypair
2. Creates the token page through the API

Usage:
    python scripts/create_token_page.py --keypair ~/.config/solana/id.json \
        --address <mint address> --name PepeMoon --logo logo.png --theme matrix
"""

import argparse
import asyncio
import json
import mimetypes
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger
from solders.keypair import Keypair

from app.clients.token_api_client import TokenApiClient
from app.config.business_constants import (
    BUTTON_STYLES,
    FONT_STYLES,
    SUPPORTED_CHAINS,
    THEMES,
)
from app.config.settings import settings
from app.services.creation_wizard import CreationWizard
from app.services.image_storage_service import UploadedImage
from app.services.payment_workflow import PaymentWorkflow
from app.services.solana_wallet import KeypairSigningAgent, init_solana_context
from app.utils.exceptions import AppError


# Configure logger
logger.remove()
logger.add(sys.stderr, level="INFO", format="{time:HH:mm:ss} | {level} | {message}")


def load_keypair(path: Path) -> Keypair:
    """Load a Solana CLI keypair file (JSON array) or a base58 secret key file."""
    content = path.expanduser().read_text().strip()
    if content.startswith("["):
        return Keypair.from_bytes(bytes(json.loads(content)))
    return Keypair.from_base58_string(content)


def load_logo(path: Path | None) -> UploadedImage | None:
    if path is None:
        return None
    content_type, _ = mimetypes.guess_type(path.name)
    return UploadedImage(data=path.read_bytes(), content_type=content_type, filename=path.name)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Pay for and create a token page")
    parser.add_argument("--keypair", type=Path, required=True, help="Payer keypair file")
    parser.add_argument("--address", required=True, help="Token contract/mint address")
    parser.add_argument("--name", required=True, help="Token name")
    parser.add_argument("--chain", default="solana", choices=SUPPORTED_CHAINS)
    parser.add_argument("--logo", type=Path, help="Logo image (JPEG, PNG or GIF)")
    parser.add_argument("--theme", default=THEMES[0], choices=THEMES)
    parser.add_argument("--button-style", default=BUTTON_STYLES[0], choices=BUTTON_STYLES)
    parser.add_argument("--font-style", default=FONT_STYLES[0], choices=FONT_STYLES)
    parser.add_argument("--api-url", default=settings.api_base_url, help="Token API origin")
    return parser.parse_args()


async def create_token_page(args: argparse.Namespace) -> int:
    """Run the wizard; returns the process exit code."""
    context = init_solana_context(settings)
    agent = KeypairSigningAgent(load_keypair(args.keypair), context.client)
    workflow = PaymentWorkflow(context, agent)

    logger.info(f"Token page fee: {context.amount_sol} SOL (+{context.fee_buffer_sol} buffer)")

    try:
        async with TokenApiClient(args.api_url) as api_client:
            wizard = CreationWizard(workflow, api_client, chain=args.chain)
            details = await wizard.pay(args.address)
            logger.success(f"Payment sent: {details.receipt.signature}")

            page = await details.create(
                args.name,
                logo=load_logo(args.logo),
                theme=args.theme,
                button_style=args.button_style,
                font_style=args.font_style,
            )
    except AppError as e:
        logger.error(f"{e.message} ({e.action})")
        return 1
    finally:
        await context.close()

    if page.is_pending:
        logger.warning(
            "Server accepted the token but has not stored it yet; "
            f"the page will appear at {page.page_path} shortly"
        )
    else:
        logger.success(f"Token page created: {args.api_url.rstrip('/')}{page.page_path}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(create_token_page(parse_args())))
