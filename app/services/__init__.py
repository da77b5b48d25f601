"""
Services.

Business logic layer.
"""

# Base Service Infrastructure
from app.services.base_service import BaseService, transaction

# Token Pages
from app.services.image_storage_service import (
    ImageStore,
    LocalImageStore,
    UploadedImage,
)
from app.services.memedrop_service import MemeDropService
from app.services.page_renderer import TokenPage, build_token_page
from app.services.token_service import (
    PendingTokenRecord,
    TokenCreationResult,
    TokenService,
)

# Payments
from app.services.payment_workflow import (
    PaymentReceipt,
    PaymentState,
    PaymentWorkflow,
)


__all__ = [
    # Base
    "BaseService",
    "transaction",
    # Token Pages
    "ImageStore",
    "LocalImageStore",
    "MemeDropService",
    "PendingTokenRecord",
    "TokenCreationResult",
    "TokenPage",
    "TokenService",
    "UploadedImage",
    "build_token_page",
    # Payments
    "PaymentReceipt",
    "PaymentState",
    "PaymentWorkflow",
]
