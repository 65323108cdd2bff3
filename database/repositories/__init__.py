from database.repositories.base import BaseRepository
from database.repositories.seeker import ProfileRepository
from database.repositories.job_posting import JobPostingRepository
from database.repositories.application import ApplicationRepository
from database.repositories.conversation import ConversationRepository
from database.repositories.api_key import ApiKeyRepository
from database.repositories.activity import ActivityRepository, AgentMappingRepository, PaymentRepository

__all__ = [
    'BaseRepository',
    'ProfileRepository',
    'JobPostingRepository',
    'ApplicationRepository',
    'ConversationRepository',
    'ApiKeyRepository',
    'ActivityRepository',
    'AgentMappingRepository',
    'PaymentRepository',
]
