#!/usr/bin/env python3
"""
Admission Outcomes - Typed results of an admission attempt.

Rejections are values, not exceptions: every gate returns either None
(pass) or an AdmissionRejected carrying a stable code and enough detail for
the calling agent to adapt without retrying blindly.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from core.scorer.models import ScoreBreakdown


class RejectionCode(str, Enum):
    VALIDATION_ERROR = 'VALIDATION_ERROR'
    NOT_FOUND = 'NOT_FOUND'
    JOB_NOT_ACTIVE = 'JOB_NOT_ACTIVE'
    DUPLICATE_APPLICATION = 'DUPLICATE_APPLICATION'
    PAYMENT_REQUIRED = 'PAYMENT_REQUIRED'
    MATCH_SCORE_TOO_LOW = 'MATCH_SCORE_TOO_LOW'
    DAILY_LIMIT_REACHED = 'DAILY_LIMIT_REACHED'


@dataclass(frozen=True)
class AdmissionRejected:
    code: RejectionCode
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    accepted = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': False,
            'error': self.message,
            'code': self.code.value,
            'details': self.details,
        }


@dataclass(frozen=True)
class AdmissionAccepted:
    """
    A created application.

    application is a plain snapshot taken before the session closed.
    """
    application: Dict[str, Any]
    conversation_id: str
    score: ScoreBreakdown
    job_title: Optional[str] = None
    company_name: Optional[str] = None

    accepted = True

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.application)
        data['conversation_id'] = self.conversation_id
        data['job_title'] = self.job_title
        data['company_name'] = self.company_name
        return data
