#!/usr/bin/env python3
"""
Agent endpoints - let a seeker's agent apply on its own.
"""

import logging
from fastapi import APIRouter, Depends

from core.admission import RejectionCode
from core.app_context import AppContext
from core.auth import CredentialIdentity
from ..dependencies import get_app_context, require_job_seeker
from ..exceptions import AdmissionRejectedException
from ..models.responses import AutoApplyResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/agent", tags=["agent"])

# Rejections that stop the whole run before any job is tried
_PRECONDITION_CODES = (
    RejectionCode.VALIDATION_ERROR,
    RejectionCode.PAYMENT_REQUIRED,
    RejectionCode.DAILY_LIMIT_REACHED,
)


@router.post("/apply", response_model=AutoApplyResponse)
def auto_apply(
    identity: CredentialIdentity = Depends(require_job_seeker),
    ctx: AppContext = Depends(get_app_context)
):
    """
    Apply to the best-ranked active jobs not yet applied to, up to the
    remaining daily limit. Each application passes the usual gates.
    """
    outcomes = ctx.admission.auto_apply(identity.user_id, ctx.cover_writer, api_key_id=identity.credential_id)

    accepted = [o.to_dict() for o in outcomes if o.accepted]
    rejected = [o for o in outcomes if not o.accepted]

    if not accepted and len(rejected) == 1 and rejected[0].code in _PRECONDITION_CODES:
        raise AdmissionRejectedException(rejected[0])

    if not outcomes:
        message = 'No new matching jobs found'
    else:
        message = f"Applied to {len(accepted)} job(s)"

    return AutoApplyResponse(
        message=message,
        applications=accepted,
        rejections=[r.to_dict() for r in rejected]
    )
