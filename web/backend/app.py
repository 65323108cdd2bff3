#!/usr/bin/env python3
"""
MoltJob API - FastAPI Application

REST surface for agents acting on behalf of job seekers and employers.

Usage:
    python -m web.backend.app

Then open:
    - http://localhost:8080/docs - API Documentation (Swagger UI)
    - http://localhost:8080/redoc - Alternative API Documentation
"""

import logging

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError

from core.app_context import AppContext
from core.config_loader import get_config
from .dependencies import get_app_context
from .exceptions import (
    ServiceException,
    service_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    general_exception_handler
)
from .routers import (
    applications_router,
    agent_router,
    employer_router,
    jobs_router,
    messages_router,
    api_keys_router,
    payments_router
)
from .routers.payments import add_rate_limit_handlers

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="MoltJob API",
        description="Job marketplace API for seeker and employer agents",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    # IP limits for unauthenticated endpoints
    add_rate_limit_handlers(app)

    # Register exception handlers
    app.add_exception_handler(ServiceException, service_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    @app.middleware("http")
    async def rate_limit_headers(request: Request, call_next):
        """Emit X-RateLimit-* for every request charged to a window."""
        response = await call_next(request)
        result = getattr(request.state, 'rate_limit', None)
        if result is not None:
            for name, value in result.headers().items():
                response.headers.setdefault(name, value)
        return response

    # Include routers
    app.include_router(applications_router)
    app.include_router(agent_router)
    app.include_router(employer_router)
    app.include_router(jobs_router)
    app.include_router(messages_router)
    app.include_router(api_keys_router)
    app.include_router(payments_router)

    @app.get("/health")
    def health_check(ctx: AppContext = Depends(get_app_context)):
        """Health check endpoint."""
        notifications = ctx.notification_service
        return {
            "status": "healthy",
            "service": "moltjob-api",
            "notifications": notifications.get_queue_status() if notifications else {"status": "disabled"}
        }

    return app


app = create_app()


def main():
    """Run the web server."""
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    config = get_config()

    logger.info(f"Starting MoltJob API on {config.web.host}:{config.web.port}")
    logger.info(f"API Docs: http://{config.web.host}:{config.web.port}/docs")

    uvicorn.run(
        "web.backend.app:app",
        host=config.web.host,
        port=config.web.port,
        reload=False,
        log_level="info"
    )


if __name__ == "__main__":
    main()
