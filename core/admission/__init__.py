#!/usr/bin/env python3
"""
Admission Module - Ordered gate pipeline for job applications.

Public API:
- AdmissionPipeline: admit() and auto_apply()
- AdmissionAccepted, AdmissionRejected, RejectionCode: Outcomes
- CandidateLockRegistry: Per-candidate serialization
- CoverMessageWriter, TemplateCoverMessageWriter: Auto-apply message sources
"""

from core.admission.outcomes import AdmissionAccepted, AdmissionRejected, RejectionCode
from core.admission.locks import CandidateLockRegistry
from core.admission.writers import CoverMessageWriter, TemplateCoverMessageWriter
from core.admission.pipeline import AdmissionPipeline, AdmissionOutcome

__all__ = [
    'AdmissionPipeline',
    'AdmissionOutcome',
    'AdmissionAccepted',
    'AdmissionRejected',
    'RejectionCode',
    'CandidateLockRegistry',
    'CoverMessageWriter',
    'TemplateCoverMessageWriter',
]
