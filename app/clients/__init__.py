"""HTTP clients."""

from .token_api_client import TokenApiClient


__all__ = ["TokenApiClient"]
