#!/usr/bin/env python3
"""
Payment service - signed charge webhooks that unlock applications.

The provider signs the raw request body with HMAC-SHA256 (hex digest) using
the shared webhook secret. A confirmed or resolved charge sets the seeker's
one-time has_paid flag.
"""

import hashlib
import hmac
import logging
import uuid
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from database.repository import MarketplaceRepository
from ..exceptions import ConfigurationException, ValidationException

logger = logging.getLogger(__name__)

CHARGE_STATUS = {
    'charge:confirmed': 'confirmed',
    'charge:resolved': 'confirmed',
    'charge:failed': 'failed',
    'charge:pending': 'pending_confirmation',
}


def verify_webhook_signature(raw_body: bytes, signature: Optional[str], secret: Optional[str]) -> bool:
    """
    Constant-time check of a hex HMAC-SHA256 signature over raw_body.

    Raises:
        ConfigurationException: If no webhook secret is configured.
    """
    if not secret:
        raise ConfigurationException('Payment webhook secret is not configured')
    if not signature:
        return False

    expected = hmac.new(secret.encode('utf-8'), raw_body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, signature.strip().lower())


class PaymentService:
    """Applies verified charge events."""

    def __init__(self, db: Session):
        self.repo = MarketplaceRepository(db)

    def apply_charge_event(self, event: Dict[str, Any]) -> Dict[str, Any]:
        """
        Update the payment and seeker for one charge event.

        The seeker comes from the stored payment, or from the charge
        metadata when no payment row exists. Unknown event types are
        acknowledged and ignored.
        """
        body = event.get('event') or {}
        event_type = body.get('type')
        charge = body.get('data') or {}

        charge_id = charge.get('id')
        if not charge_id:
            raise ValidationException('Missing charge data')

        payment = self.repo.payments.get_by_charge_id(charge_id)
        status = CHARGE_STATUS.get(event_type)

        if status is None:
            logger.info(f"Ignoring {event_type} for charge {charge_id}")
            return {'received': True}

        if payment is not None and not (payment.status == 'confirmed' and status == 'confirmed'):
            payment.status = status

        if status == 'confirmed':
            seeker_id = payment.job_seeker_id if payment else self._metadata_seeker_id(charge)
            if seeker_id is not None:
                self.repo.profiles.mark_paid(seeker_id)
            else:
                logger.warning(f"Confirmed charge {charge_id} has no job seeker")

        self.repo.commit()
        logger.info(f"Charge {charge_id}: {event_type} -> {status}")
        return {'received': True}

    @staticmethod
    def _metadata_seeker_id(charge: Dict[str, Any]) -> Optional[uuid.UUID]:
        raw = (charge.get('metadata') or {}).get('job_seeker_id')
        if not raw:
            return None
        try:
            return uuid.UUID(str(raw))
        except ValueError:
            logger.warning(f"Charge metadata has malformed job_seeker_id: {raw}")
            return None
