#!/usr/bin/env python3
"""
Wake queue worker.

Pulls process_wake_task jobs that NotificationService enqueued after an
application, a status change or a new message, and POSTs each wake to the
counterparty's orchestrator. Without Redis the API falls back to daemon
threads and this worker is not needed.

Usage:
    python -m notification.worker
    python -m notification.worker --burst
    python -m notification.worker --redis-url redis://cache:6379/1 --verbose
"""

import sys
import argparse
import logging
from typing import List, Optional

from redis import Redis
from rq import Worker

from core.config_loader import get_config
from notification.service import process_wake_task

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

DEFAULT_REDIS_URL = 'redis://localhost:6379/0'


def start_worker(burst: bool = False, queues: Optional[List[str]] = None, redis_url: Optional[str] = None):
    """Run an RQ worker over the wake queues until stopped (or drained in burst mode)."""
    config = get_config().notifications
    redis_url = redis_url or config.redis_url or DEFAULT_REDIS_URL
    queues = queues or [config.queue_name]

    if not config.orchestrator_url:
        logger.warning("No orchestrator_url configured; wake jobs will be dropped as undeliverable")

    logger.info(f"Wake worker for {process_wake_task.__name__} on {', '.join(queues)} (burst={burst})")

    try:
        redis_conn = Redis.from_url(redis_url)
        redis_conn.ping()
    except Exception as e:
        logger.error(f"Cannot reach Redis for the wake queue: {e}")
        sys.exit(1)

    try:
        Worker(queues, connection=redis_conn).work(burst=burst)
    except KeyboardInterrupt:
        logger.info("Wake worker stopped")


def main():
    parser = argparse.ArgumentParser(description='MoltJob agent wake worker')
    parser.add_argument('--burst', action='store_true', help='Drain the queue and exit')
    parser.add_argument('--queues', nargs='+', default=None, help='Queue names (default: notifications.queue_name)')
    parser.add_argument('--redis-url', default=None, help='Overrides notifications.redis_url')
    parser.add_argument('--verbose', action='store_true')

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    start_worker(burst=args.burst, queues=args.queues, redis_url=args.redis_url)


if __name__ == '__main__':
    main()
