#!/usr/bin/env python3
"""
Notification Dispatcher - Wakes a counterparty's agent through the orchestrator.

Usage:
    dispatcher = NotificationDispatcher(config.notifications)
    delivered = dispatcher.deliver(agent_id, "application_received", {...})

Response handling:
- 202: accepted for async processing, delivered
- 404 / 410: agent unknown or deleted, give up immediately
- 503: orchestrator busy, wait the cooldown (30s) and retry
- other 5xx, timeouts, connection errors: exponential backoff (5s, 10s, ...) and retry
- anything else: give up

Retry budget is max_retries (2) on top of the first attempt. deliver() never
raises; exhausting the budget is logged and returns False.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional

import requests
from tenacity import (
    Retrying,
    RetryCallState,
    RetryError,
    retry_if_exception,
    stop_after_attempt,
)

from core.config_loader import NotificationConfig

logger = logging.getLogger(__name__)


class RetryableDeliveryError(Exception):
    """Server side failure worth another attempt."""

    def __init__(self, status_code: int):
        super().__init__(f"orchestrator returned {status_code}")
        self.status_code = status_code


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, (RetryableDeliveryError, requests.RequestException))


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception()
    wait = retry_state.next_action.sleep if retry_state.next_action else 0
    logger.warning(
        "Wake delivery failed (attempt %s). Waiting %.1fs before retry. Details: %s",
        retry_state.attempt_number, wait, exc,
    )


class NotificationDispatcher:
    """
    Delivers {event_type, payload} envelopes to an agent's wake endpoint.

    Args:
        config: NotificationConfig (orchestrator URL, token, retry policy)
        session: requests.Session to reuse; one is created when omitted
        sleep: Sleep function used between attempts (tests pass a stub)
    """

    def __init__(
        self,
        config: Optional[NotificationConfig] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.config = config or NotificationConfig()
        self.session = session or requests.Session()
        self._sleep = sleep

    def _wait_seconds(self, retry_state: RetryCallState) -> float:
        exc = retry_state.outcome.exception()
        if isinstance(exc, RetryableDeliveryError) and exc.status_code == 503:
            return self.config.unavailable_cooldown_seconds
        return self.config.backoff_base_seconds * 2 ** (retry_state.attempt_number - 1)

    def _endpoint(self, target_id: str) -> str:
        base = self.config.orchestrator_url.rstrip('/')
        return base + self.config.wake_path.format(agent_id=target_id)

    def _headers(self) -> Dict[str, str]:
        headers = {
            'Content-Type': 'application/json',
            'User-Agent': 'MoltJob-Notification-Service/1.0'
        }
        if self.config.orchestrator_token:
            headers['Authorization'] = f"Bearer {self.config.orchestrator_token}"
        return headers

    def _attempt(self, url: str, body: Dict[str, Any], target_id: str) -> bool:
        response = self.session.post(
            url,
            json=body,
            headers=self._headers(),
            timeout=self.config.request_timeout_seconds
        )
        status = response.status_code
        logger.debug(f"Wake response for agent {target_id}: {status}")

        if status == 202:
            return True
        if status in (404, 410):
            logger.error(f"Agent {target_id} not found or deleted ({status})")
            return False
        if status >= 500:
            raise RetryableDeliveryError(status)

        logger.error(f"Unexpected status {status} waking agent {target_id}")
        return False

    def deliver(self, target_id: str, event_type: str, payload: Dict[str, Any]) -> bool:
        if not self.config.orchestrator_url:
            logger.warning("Orchestrator URL not configured, skipping wake")
            return False

        url = self._endpoint(target_id)
        body = {'event_type': event_type, 'payload': payload}

        retrying = Retrying(
            stop=stop_after_attempt(self.config.max_retries + 1),
            wait=self._wait_seconds,
            retry=retry_if_exception(_is_retryable),
            before_sleep=_log_retry,
            sleep=self._sleep,
            reraise=True,
        )

        try:
            delivered = retrying(self._attempt, url, body, target_id)
        except (RetryableDeliveryError, requests.RequestException, RetryError) as e:
            logger.error(
                f"Failed to wake agent {target_id} for {event_type} after "
                f"{self.config.max_retries} retries: {e}"
            )
            return False

        if delivered:
            logger.info(f"Woke agent {target_id} for {event_type}")
        return delivered
