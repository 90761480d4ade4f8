"""Worker that consumes bucket notifications and runs the remux handler."""

import json
from typing import Any

from remux_common import EventPublishError, setup_logging
from remux_common.infrastructure import MessageBroker

from config import NotificationConfig
from domain import RemuxEvent, RemuxResult
from exceptions import InvalidNotificationError, TranscoderUnavailableError
from handlers import RemuxEventHandler

logger = setup_logging()


class Worker:
    """Consumes messages from the queue and orchestrates processing."""

    def __init__(
        self,
        broker: MessageBroker,
        handler: RemuxEventHandler,
        notification: NotificationConfig,
        output_bucket_name: str,
    ):
        self._broker = broker
        self._handler = handler
        self._notification = notification
        self._output_bucket_name = output_bucket_name

    def start(self) -> None:
        """Starts consuming messages from the queue."""
        logger.info("Worker initialized, starting message consumption")
        self._broker.consume(self._on_message)

    def _on_message(
        self, body: bytes, delivery_tag: int, headers: dict[str, Any] | None
    ) -> None:
        """Callback for each received message."""
        logger.info("Starting event handling", extra={"delivery_tag": delivery_tag})

        try:
            event = RemuxEvent.from_notification(json.loads(body))
        except (ValueError, InvalidNotificationError) as e:
            logger.exception("Invalid notification format", extra={"error": str(e)})
            self._broker.reject(delivery_tag)
            return

        try:
            result = self._handler.handle(event)
        except TranscoderUnavailableError:
            logger.critical(
                "Transcoder unavailable, stopping worker",
                extra={"source_key": event.source_key},
            )
            self._broker.reject(delivery_tag)
            raise
        except Exception:
            logger.exception(
                "Event processing failed",
                extra={"source_key": event.source_key},
            )
            self._broker.reject(delivery_tag)
            return

        self._broker.acknowledge(delivery_tag)
        logger.info(
            "Event processed",
            extra={"source_key": event.source_key, "result": result.description},
        )

        if not result.skipped and self._notification.enabled:
            self._notify(result)

    def _notify(self, result: RemuxResult) -> None:
        try:
            self._broker.publish(
                routing_key=self._notification.routing_key,
                payload={
                    "source_bucket": result.source_bucket,
                    "source_key": result.source_key,
                    "destination_bucket": self._output_bucket_name,
                    "destination_key": result.dest_key,
                    "successful": result.successful,
                    "description": result.description,
                },
            )
        except EventPublishError:
            logger.warning(
                "Could not send completion notification",
                extra={"source_key": result.source_key},
            )
