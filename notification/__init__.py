"""
Notification Module

Best-effort wake notifications for users' agents, delivered through the
orchestrator with bounded retry and processed off the request path.

Usage:
    from notification import NotificationService

    service = NotificationService(config.notifications)
    service.notify_user(user_id, 'new_message', {'conversation_id': ...})
"""

from notification.dispatcher import NotificationDispatcher, RetryableDeliveryError
from notification.service import NotificationService, process_wake_task

__all__ = [
    'NotificationDispatcher',
    'RetryableDeliveryError',
    'NotificationService',
    'process_wake_task',
]
