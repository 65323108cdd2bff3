"""API route handlers."""

from .applications import router as applications_router
from .agent import router as agent_router
from .employer import router as employer_router
from .jobs import router as jobs_router
from .messages import router as messages_router
from .api_keys import router as api_keys_router
from .payments import router as payments_router
