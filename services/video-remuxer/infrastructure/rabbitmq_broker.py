"""RabbitMQ implementation of the MessageBroker interface."""

import json
from collections.abc import Callable
from typing import Any

from pika.adapters.blocking_connection import BlockingChannel
from remux_common import EventPublishError, RabbitMQConfig, setup_logging

from .interfaces import MessageBroker

logger = setup_logging()


class RabbitMQBroker(MessageBroker):
    """Handles message broker operations using RabbitMQ."""

    def __init__(self, channel: BlockingChannel, config: RabbitMQConfig):
        self._channel = channel
        self._config = config

    def publish(self, routing_key: str, payload: dict) -> None:
        """
        Sends a JSON-encoded completion event to the service exchange.

        Args:
            routing_key: Topic the remux notification is published under.
            payload: Event body, serialized with ``json.dumps``.

        Raises:
            EventPublishError: If the channel refuses the message.
        """
        try:
            self._channel.basic_publish(
                exchange=self._config.exchange_name,
                routing_key=routing_key,
                body=json.dumps(payload),
            )
            logger.info(
                "Event published to RabbitMQ",
                extra={
                    "exchange": self._config.exchange_name,
                    "routing_key": routing_key,
                },
            )
        except Exception as e:
            logger.exception(
                "RabbitMQ publish failed",
                extra={"routing_key": routing_key},
            )
            raise EventPublishError(routing_key, e) from e

    def acknowledge(self, delivery_tag: int) -> None:
        """Marks a bucket notification as handled."""
        self._channel.basic_ack(delivery_tag=delivery_tag)

    def reject(self, delivery_tag: int) -> None:
        """Routes a notification to the dead-letter queue; it is never redelivered."""
        self._channel.basic_nack(delivery_tag=delivery_tag, requeue=False)

    def consume(
        self, callback: Callable[[bytes, int, dict[str, Any] | None], None]
    ) -> None:
        """
        Blocks, feeding each bucket notification on the remux queue to ``callback``.

        Args:
            callback: Called with (body, delivery_tag, headers). It must ack or
                reject the delivery itself.
        """

        def on_message(ch, method, properties, body):
            headers = properties.headers if properties else None
            callback(body, method.delivery_tag, headers)

        self._channel.basic_consume(
            queue=self._config.queue_config.name,
            on_message_callback=on_message,
        )
        logger.info(
            "Message consumption started",
            extra={"queue": self._config.queue_config.name},
        )
        self._channel.start_consuming()

    def setup_queue_infrastructure(self) -> None:
        """Declares the dead-letter path, the topic exchange and the bound remux queue."""
        queue_config = self._config.queue_config

        # Dead letter infrastructure
        self._channel.exchange_declare(
            exchange=queue_config.dlq_exchange_name,
            exchange_type="direct",
            durable=True,
        )
        self._channel.queue_declare(queue=queue_config.dlq_name, durable=True)
        self._channel.queue_bind(
            queue=queue_config.dlq_name,
            exchange=queue_config.dlq_exchange_name,
            routing_key=queue_config.dlq_routing_key,
        )

        # Main exchange, also the target of MinIO bucket notifications
        self._channel.exchange_declare(
            exchange=self._config.exchange_name,
            exchange_type="topic",
            durable=True,
        )

        # Rejected messages go straight to the dead-letter queue
        queue_args = {
            "x-queue-type": queue_config.queue_type,
            "x-dead-letter-exchange": queue_config.dlq_exchange_name,
            "x-dead-letter-routing-key": queue_config.dlq_routing_key,
        }
        self._channel.queue_declare(
            queue=queue_config.name,
            durable=True,
            arguments=queue_args,
        )
        self._channel.queue_bind(
            queue=queue_config.name,
            exchange=self._config.exchange_name,
            routing_key=queue_config.expected_routing_key,
        )

        logger.info(
            "RabbitMQ infrastructure setup complete",
            extra={
                "queue": queue_config.name,
                "exchange": self._config.exchange_name,
            },
        )
