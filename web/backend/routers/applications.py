#!/usr/bin/env python3
"""
Application endpoints - submit and list a job seeker's applications.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.app_context import AppContext
from core.auth import CredentialIdentity
from ..dependencies import get_app_context, get_db, require_job_seeker
from ..exceptions import AdmissionRejectedException
from ..models.requests import ApplicationCreate
from ..models.responses import ApplicationSummary, ApplicationsResponse
from ..services import ApplicationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/applications", tags=["applications"])


@router.post("", response_model=ApplicationSummary, status_code=201)
def create_application(
    body: ApplicationCreate,
    identity: CredentialIdentity = Depends(require_job_seeker),
    ctx: AppContext = Depends(get_app_context)
):
    """
    Apply to a job.

    Runs the admission gates in order: profile, active job, duplicate,
    payment, match score threshold, daily limit. A rejection comes back
    with its code and diagnostics (score, threshold, missing skills).
    """
    outcome = ctx.admission.admit(
        identity.user_id,
        body.job_posting_id,
        body.cover_message,
        api_key_id=identity.credential_id
    )
    if not outcome.accepted:
        raise AdmissionRejectedException(outcome)
    return outcome.to_dict()


@router.get("", response_model=ApplicationsResponse)
def list_applications(
    status: Optional[str] = Query(default=None, description="Filter by application status"),
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=20, ge=1, le=100),
    identity: CredentialIdentity = Depends(require_job_seeker),
    db: Session = Depends(get_db)
):
    """List the caller's applications, newest first."""
    service = ApplicationService(db)
    return service.list_for_seeker(identity.user_id, status=status, page=page, per_page=per_page)
