#!/usr/bin/env python3
"""
Request models for API endpoints.
"""

import uuid
from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional


class ApplicationCreate(BaseModel):
    """Submit an application."""
    job_posting_id: uuid.UUID = Field(..., description="Job posting to apply to")
    cover_message: str = Field(..., description="First message to the employer")


class StatusUpdate(BaseModel):
    """Employer moves an application along."""
    status: str = Field(..., description="pending, reviewing, shortlisted, interview_scheduled, accepted or rejected")
    employer_notes: Optional[str] = Field(None, description="Private notes kept on the application")


class MessageCreate(BaseModel):
    content: str = Field(..., description="Message text")


class ApiKeyCreate(BaseModel):
    """Issue a new API key."""
    name: str = Field(default="Default", min_length=1, max_length=100, description="Label for the key")
    expires_at: Optional[datetime] = Field(None, description="Optional expiry (timezone aware)")
