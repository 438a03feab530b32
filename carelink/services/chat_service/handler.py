"""Chat Service HTTP handler.

Serves the demo assistant chat and the emergency chats review queue.
Every user message posted here is classified by the emergency detector
before the assistant reply is chosen.
"""
import logging
import os
from flask import Flask, request, jsonify

from carelink.shared.utils import configure_pii_salt
from carelink.services.safety_service.config import DetectorConfig
from carelink.services.safety_service.emergency_publisher import EmergencyEventPublisher
from .chat_manager import ChatManager
from .config import ChatConfig
from .errors import ChatNotFoundError, EmptyMessageError

logger = logging.getLogger(__name__)

app = Flask(__name__)

pii_salt = os.getenv("PII_HASH_SALT", "default_dev_salt_change_in_production_32chars")
configure_pii_salt(pii_salt)

config = ChatConfig(
    seed_demo_chats=os.getenv("SEED_DEMO_CHATS", "true").lower() == "true",
    publish_emergencies=os.getenv("EMERGENCY_PUBLISHING_ENABLED", "false").lower() == "true",
)
detector_config = DetectorConfig(
    detector_version=os.getenv("DETECTOR_VERSION", DetectorConfig.detector_version),
)

emergency_publisher = EmergencyEventPublisher(
    stream_name=os.getenv("KINESIS_STREAM_NAME", "carelink-emergency-events"),
    enabled=config.publish_emergencies,
)

chat_manager = ChatManager(
    publisher=emergency_publisher,
    config=config,
    detector_config=detector_config,
)
if config.seed_demo_chats:
    chat_manager.seed_demo_chats()


def _string_field(data: dict, name: str):
    value = data.get(name)
    return value if isinstance(value, str) else None


@app.route("/health", methods=["GET"])
def health():
    """Health check endpoint."""
    return jsonify({
        "status": "healthy",
        "service": "chat-service",
        "detector_version": detector_config.detector_version,
    }), 200


@app.route("/ready", methods=["GET"])
def ready():
    """Readiness check."""
    if chat_manager is None:
        return jsonify({"status": "not_ready"}), 503
    return jsonify({"status": "ready"}), 200


@app.route("/chats", methods=["POST"])
def create_chat():
    """Start a chat.

    Request Body:
        {"user_id": "user_123", "counselor_id": "1" (optional)}
    """
    data = request.get_json(silent=True) or {}
    user_id = _string_field(data, "user_id")
    if not user_id:
        return jsonify({"error": "Missing required field: user_id"}), 400

    chat = chat_manager.start_chat(
        user_id=user_id,
        counselor_id=_string_field(data, "counselor_id"),
    )
    return jsonify(chat.to_dict()), 201


@app.route("/chats", methods=["GET"])
def list_chats():
    chats = chat_manager.store.list_chats()
    return jsonify({"chats": [chat.to_dict() for chat in chats], "count": len(chats)}), 200


@app.route("/chats/emergency", methods=["GET"])
def list_emergency_chats():
    """Emergency review queue: chats with at least one flagged message."""
    chats = chat_manager.store.emergency_chats()
    return jsonify({"chats": [chat.to_dict() for chat in chats], "count": len(chats)}), 200


@app.route("/chats/<chat_id>", methods=["GET"])
def get_chat(chat_id: str):
    try:
        chat = chat_manager.store.get_chat(chat_id)
    except ChatNotFoundError:
        return jsonify({"error": "Chat not found", "chat_id": chat_id}), 404
    return jsonify(chat.to_dict()), 200


@app.route("/chats/<chat_id>/messages", methods=["POST"])
def send_message(chat_id: str):
    """Post a user message and receive the assistant reply.

    Request Body:
        {"content": "text typed by the user", "user_id": "user_123" (optional)}

    Response:
        {
            "message": {..., "is_emergency": true | false},
            "reply": {...},
            "chat_is_emergency": true | false
        }
    """
    data = request.get_json(silent=True) or {}
    content = _string_field(data, "content")
    if content is None:
        return jsonify({"error": "Missing required field: content"}), 400

    try:
        turn = chat_manager.send_user_message(
            chat_id=chat_id,
            content=content,
            user_id=_string_field(data, "user_id"),
        )
    except EmptyMessageError as e:
        return jsonify({"error": str(e)}), 400
    except ChatNotFoundError:
        return jsonify({"error": "Chat not found", "chat_id": chat_id}), 404
    except Exception as e:
        logger.error(
            "CHAT_MESSAGE_ERROR",
            extra={
                "chat_id": chat_id,
                "error": str(e),
                "error_type": type(e).__name__,
            }
        )
        return jsonify({"error": "Failed to process message"}), 500

    return jsonify(turn.to_dict()), 200


@app.route("/chats/<chat_id>/counselor-messages", methods=["POST"])
def send_counselor_message(chat_id: str):
    """Post a counselor message to a chat.

    Request Body:
        {"content": "...", "counselor_id": "1" (optional)}
    """
    data = request.get_json(silent=True) or {}
    content = _string_field(data, "content")
    if content is None:
        return jsonify({"error": "Missing required field: content"}), 400

    try:
        message = chat_manager.add_counselor_message(
            chat_id=chat_id,
            content=content,
            counselor_id=_string_field(data, "counselor_id"),
        )
    except EmptyMessageError as e:
        return jsonify({"error": str(e)}), 400
    except ChatNotFoundError:
        return jsonify({"error": "Chat not found", "chat_id": chat_id}), 404

    return jsonify(message.to_dict()), 201


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    port = int(os.getenv("PORT", "8002"))
    app.run(host="0.0.0.0", port=port, debug=False)
