#!/usr/bin/env python3
"""
Payment endpoints - provider webhook for the one-time unlock fee.
"""

import json
import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from core.app_context import AppContext
from core.config_loader import get_config
from ..dependencies import get_app_context, get_db
from ..exceptions import InvalidSignatureException, ValidationException, error_body
from ..models.responses import WebhookResponse
from ..services import PaymentService, verify_webhook_signature

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)

router = APIRouter(prefix="/api/v1/payments", tags=["payments"])


def add_rate_limit_handlers(app):
    """Add rate limit exception handlers to the FastAPI app."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


async def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content=error_body(str(exc.detail), "RATE_LIMIT_EXCEEDED")
    )


@router.post("/webhook", response_model=WebhookResponse)
@limiter.limit(lambda: get_config().rate_limit.webhook_limit)
async def payment_webhook(
    request: Request,
    ctx: AppContext = Depends(get_app_context),
    db: Session = Depends(get_db)
):
    """
    Signed charge events. Unauthenticated; the HMAC signature over the raw
    body is the only proof of origin.
    """
    payments = ctx.config.payments
    raw_body = await request.body()
    signature = request.headers.get(payments.signature_header)

    if not verify_webhook_signature(raw_body, signature, payments.webhook_secret):
        logger.warning(f"Rejected payment webhook from {get_remote_address(request)}")
        raise InvalidSignatureException('Invalid webhook signature')

    try:
        event = json.loads(raw_body)
    except ValueError:
        raise ValidationException('Webhook body is not valid JSON')
    if not isinstance(event, dict):
        raise ValidationException('Webhook body must be a JSON object')

    return PaymentService(db).apply_charge_event(event)
