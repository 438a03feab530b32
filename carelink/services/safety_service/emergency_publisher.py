"""Emergency flag event publisher.

Publishes an event to a Kinesis stream whenever a chat message is flagged,
so staff tooling (the emergency chats review queue, paging) can react
without the chat flow calling it directly.

Publishing never blocks or fails the chat: the crisis-escalation reply is
sent whether or not the event goes out.
"""
import json
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
import uuid

from .detector import EmergencyMatch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmergencyFlaggedEvent:
    """Immutable event describing a flagged chat message."""
    event_id: str
    event_type: str = "safety.emergency.flagged"
    chat_id: str = ""
    message_id: str = ""
    user_id_hash: str = ""
    category: Optional[str] = None
    phrase: Optional[str] = None
    requires_human_review: bool = True
    detector_version: str = ""
    timestamp: datetime = field(default_factory=datetime.utcnow)

    def to_kinesis_payload(self) -> dict:
        """Convert to Kinesis record payload."""
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "timestamp": self.timestamp.isoformat() + "Z",
            "source": "safety-service",
            "data": {
                "chat_id": self.chat_id,
                "message_id": self.message_id,
                "user_id_hash": self.user_id_hash,
                "category": self.category,
                "phrase": self.phrase,
                "requires_human_review": self.requires_human_review,
                "detector_version": self.detector_version,
            }
        }


class EmergencyEventPublisher:
    """Publishes emergency flag events to a Kinesis stream.

    Failure Handling:
        - Publishing failure never raises
        - Failures are logged at CRITICAL level for alerting
    """

    def __init__(
        self,
        stream_name: str = "carelink-emergency-events",
        enabled: bool = True,
        region: Optional[str] = None,
    ):
        """Initialize publisher.

        Args:
            stream_name: Kinesis stream name
            enabled: Whether publishing is enabled (disable for local dev)
            region: AWS region (defaults to AWS_REGION env var)
        """
        self.stream_name = stream_name
        self.enabled = enabled
        self.region = region or os.getenv("AWS_REGION", "us-east-1")
        self._kinesis_client = None

        logger.info(
            "EMERGENCY_PUBLISHER_INITIALIZED",
            extra={
                "stream_name": stream_name,
                "enabled": enabled,
                "region": self.region,
            }
        )

    @property
    def kinesis_client(self):
        """Lazy initialization of Kinesis client."""
        if self._kinesis_client is None and self.enabled:
            try:
                import boto3
                self._kinesis_client = boto3.client(
                    "kinesis",
                    region_name=self.region,
                )
            except Exception as e:
                logger.error(
                    "KINESIS_CLIENT_INIT_FAILED",
                    extra={"error": str(e), "error_type": type(e).__name__}
                )
        return self._kinesis_client

    def publish_flagged(
        self,
        chat_id: str,
        message_id: str,
        user_id_hash: str,
        match: Optional[EmergencyMatch],
        detector_version: str,
    ) -> bool:
        """Publish an emergency flag event.

        Args:
            chat_id: Chat containing the flagged message
            message_id: The flagged message
            user_id_hash: Hashed user identifier, used as partition key
            match: Category and phrase that triggered the flag
            detector_version: Taxonomy version for review

        Returns:
            True if published successfully, False otherwise
        """
        if not self.enabled:
            logger.info(
                "EMERGENCY_PUBLISH_SKIPPED",
                extra={
                    "message_id": message_id,
                    "reason": "publishing_disabled",
                }
            )
            return False

        event = EmergencyFlaggedEvent(
            event_id=f"evt_{uuid.uuid4().hex[:12]}",
            chat_id=chat_id,
            message_id=message_id,
            user_id_hash=user_id_hash,
            category=match.category if match else None,
            phrase=match.phrase if match else None,
            detector_version=detector_version,
        )
        payload = event.to_kinesis_payload()

        try:
            if self.kinesis_client is None:
                logger.critical(
                    "EMERGENCY_EVENT_FALLBACK_LOG",
                    extra={
                        "event_id": event.event_id,
                        "payload": json.dumps(payload),
                        "reason": "kinesis_client_unavailable",
                        "action": "MANUAL_REVIEW_REQUIRED",
                    }
                )
                return False

            response = self.kinesis_client.put_record(
                StreamName=self.stream_name,
                Data=json.dumps(payload),
                PartitionKey=user_id_hash,  # Same user -> same shard
            )

            logger.info(
                "EMERGENCY_EVENT_PUBLISHED",
                extra={
                    "event_id": event.event_id,
                    "chat_id": chat_id,
                    "message_id": message_id,
                    "category": event.category,
                    "shard_id": response.get("ShardId"),
                    "sequence_number": response.get("SequenceNumber"),
                }
            )
            return True

        except Exception as e:
            logger.critical(
                "EMERGENCY_EVENT_PUBLISH_FAILED",
                extra={
                    "event_id": event.event_id,
                    "chat_id": chat_id,
                    "message_id": message_id,
                    "error": str(e),
                    "error_type": type(e).__name__,
                    "action": "MANUAL_REVIEW_REQUIRED",
                    "payload": json.dumps(payload),
                }
            )
            return False
