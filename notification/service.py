#!/usr/bin/env python3
"""
Notification Service - Fire-and-forget agent wake events.

Events (application_received, application_status_changed, new_message) are
handed to a background worker and never awaited:
- Redis Queue when Redis is reachable (processed by notification.worker)
- a daemon thread otherwise

The task resolves the recipient's hosted agent and calls
NotificationDispatcher.deliver(). Failures are logged, never raised.

Usage:
    from notification.service import NotificationService

    service = NotificationService(config.notifications)
    service.notify_user(employer_user_id, "application_received", {...})
"""

import logging
import threading
import uuid
from typing import Optional, Dict, Any, Callable

from redis import Redis
from rq import Queue

from core.config_loader import NotificationConfig, get_config
from database.uow import marketplace_uow
from notification.dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Schedules wake notifications for users' agents.

    Args:
        config: NotificationConfig
        dispatcher: Used by the in-process fallback; built from config when omitted
        uow_factory: Unit of work used by the in-process fallback
    """

    def __init__(
        self,
        config: Optional[NotificationConfig] = None,
        dispatcher: Optional[NotificationDispatcher] = None,
        uow_factory: Callable = marketplace_uow
    ):
        self.config = config or NotificationConfig()
        self.dispatcher = dispatcher or NotificationDispatcher(self.config)
        self.uow_factory = uow_factory

        self.redis_conn = None
        self.queue = None
        self.async_mode = False

        if not self.config.use_async_queue or not self.config.redis_url:
            logger.info("Async queue disabled or Redis not configured. Using background threads.")
        else:
            try:
                self.redis_conn = Redis.from_url(self.config.redis_url)
                # Validate connection with ping before using
                self.redis_conn.ping()
                self.queue = Queue(self.config.queue_name, connection=self.redis_conn)
                self.async_mode = True
                logger.info("Notification service connected to Redis")
            except Exception as e:
                logger.error(f"Redis connection failed: {e}. Falling back to background threads.")
                self.redis_conn = None
                self.queue = None

    def notify_user(self, user_id: Any, event_type: str, payload: Dict[str, Any]) -> Optional[str]:
        """
        Schedule a wake event for user_id's hosted agent.

        Returns:
            RQ job id when queued, None when run on a thread or disabled
        """
        if not self.config.enabled:
            logger.debug(f"Notifications disabled, dropping {event_type} for {user_id}")
            return None

        if self.async_mode:
            job = self.queue.enqueue(
                process_wake_task,
                str(user_id),
                event_type,
                payload,
                job_timeout=self.config.job_timeout,
                result_ttl=86400
            )
            logger.info(f"Queued {event_type} for user {user_id} as job {job.id}")
            return job.id

        thread = threading.Thread(
            target=process_wake_task,
            args=(str(user_id), event_type, payload),
            kwargs={'dispatcher': self.dispatcher, 'uow_factory': self.uow_factory},
            name=f"wake-{event_type}",
            daemon=True
        )
        thread.start()
        return None

    def get_queue_status(self) -> Dict[str, Any]:
        """Get queue status."""
        if not self.async_mode:
            return {'status': 'thread_mode', 'queue_length': 0}

        try:
            return {
                'status': 'active',
                'queue_length': len(self.queue),
                'redis_connected': self.redis_conn.ping()
            }
        except Exception as e:
            return {'status': 'error', 'error': str(e)}


# Worker task - must be at module level for RQ
def process_wake_task(
    user_id: str,
    event_type: str,
    payload: Dict[str, Any],
    dispatcher: Optional[NotificationDispatcher] = None,
    uow_factory: Optional[Callable] = None
) -> bool:
    """
    Wake user_id's hosted agent. Self-hosted agents and users without an
    agent are skipped.

    Returns:
        True if the orchestrator accepted the event
    """
    try:
        with (uow_factory or marketplace_uow)() as repo:
            mapping = repo.agents.get_hosted(uuid.UUID(str(user_id)))
            agent_id = mapping.agent_id if mapping else None

        if agent_id is None:
            logger.debug(f"No hosted agent for user {user_id}, skipping {event_type}")
            return False

        dispatcher = dispatcher or NotificationDispatcher(get_config().notifications)
        return dispatcher.deliver(agent_id, event_type, payload)
    except Exception as e:
        logger.error(f"Wake task {event_type} for user {user_id} failed: {e}", exc_info=True)
        return False
