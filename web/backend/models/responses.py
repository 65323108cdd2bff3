#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Any


class Pagination(BaseModel):
    page: int
    per_page: int
    total: int
    total_pages: int


class ApplicationSummary(BaseModel):
    """One application as seen by its seeker or employer."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "job_seeker_id": "6ba7b810-9dad-11d1-80b4-00c04fd430c8",
                "job_posting_id": "6ba7b811-9dad-11d1-80b4-00c04fd430c8",
                "match_score": 82.5,
                "status": "pending",
                "cover_message": "Hello...",
                "conversation_id": "6ba7b812-9dad-11d1-80b4-00c04fd430c8",
                "job_title": "Senior Python Developer",
                "company_name": "TechCorp",
                "created_at": "2026-02-01T12:00:00+00:00",
            }
        }
    )

    id: str
    job_seeker_id: str
    job_posting_id: str
    match_score: float = Field(ge=0, le=100)
    status: str
    cover_message: Optional[str] = None
    employer_notes: Optional[str] = None
    conversation_id: Optional[str] = None
    job_title: Optional[str] = None
    company_name: Optional[str] = None
    seeker_name: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ApplicationsResponse(BaseModel):
    data: List[ApplicationSummary]
    pagination: Pagination


class AutoApplyResponse(BaseModel):
    """Outcome of one agent auto-apply run."""
    message: str
    applications: List[ApplicationSummary]
    rejections: List[Dict[str, Any]]


class JobsResponse(BaseModel):
    data: List[Dict[str, Any]]
    pagination: Pagination


class MatchExplanationResponse(BaseModel):
    """Score of the caller against one posting, with skill diagnostics."""
    job_posting_id: str
    score: float = Field(ge=0, le=100)
    threshold: Optional[float] = None
    passed: bool
    breakdown: Dict[str, float]
    skill_analysis: Dict[str, Any]


class MessageResponse(BaseModel):
    id: str
    conversation_id: str
    sender_type: str
    content: str
    read_at: Optional[str] = None
    created_at: Optional[str] = None


class MarkReadResponse(BaseModel):
    success: bool
    marked: int


class ApiKeySummary(BaseModel):
    """Listable key metadata. Never includes the secret or its hash."""
    id: str
    user_id: str
    key_prefix: str
    name: str
    scopes: List[str] = []
    last_used_at: Optional[str] = None
    expires_at: Optional[str] = None
    revoked_at: Optional[str] = None
    created_at: Optional[str] = None


class ApiKeyCreatedResponse(BaseModel):
    """The only response that ever contains the raw key."""
    key: str
    api_key: ApiKeySummary
    message: str = "Store this key now. It cannot be retrieved again."


class ApiKeyListResponse(BaseModel):
    data: List[ApiKeySummary]


class RevokeResponse(BaseModel):
    success: bool
    id: str


class WebhookResponse(BaseModel):
    received: bool
