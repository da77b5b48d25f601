"""
Dramatiq broker configuration.

Redis-based message broker for the task queue. The test environment uses
an in-memory StubBroker so actors can be declared and enqueued without a
Redis server.
"""

import dramatiq
from dramatiq.brokers.redis import RedisBroker
from dramatiq.brokers.stub import StubBroker
from dramatiq.middleware import CurrentMessage
from loguru import logger

from app.config.settings import settings


def create_broker() -> dramatiq.Broker:
    """Create the broker for the current environment."""
    if settings.environment == "test":
        return StubBroker()

    return RedisBroker(url=settings.redis_url)


broker = create_broker()

# CurrentMessage: gives actors access to the retry count.
# Retries (exponential backoff) is default middleware, tuned per actor.
broker.add_middleware(CurrentMessage())

# Set as default broker
dramatiq.set_broker(broker)

logger.info(f"Dramatiq broker initialized: {broker.__class__.__name__}")
