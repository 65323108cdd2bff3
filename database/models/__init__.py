from .base import Base, JSONType, utcnow
from .user import User, ApiKey, AgentMapping
from .profile import JobSeeker, Employer
from .job import JobPosting
from .application import Application, Conversation, Message, APPLICATION_STATUSES
from .activity import ActivityLog, Payment

__all__ = [
    'Base',
    'JSONType',
    'utcnow',
    'User',
    'ApiKey',
    'AgentMapping',
    'JobSeeker',
    'Employer',
    'JobPosting',
    'Application',
    'Conversation',
    'Message',
    'APPLICATION_STATUSES',
    'ActivityLog',
    'Payment',
]
