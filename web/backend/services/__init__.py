"""Business logic services."""

from .application_service import ApplicationService
from .conversation_service import ConversationService
from .job_service import JobService
from .payment_service import PaymentService, verify_webhook_signature
