"""Safety Service HTTP handler.

Exposes the emergency detector to clients that cannot import it directly.
The detector itself never logs; this handler logs the outcome of each
request without the message text.
"""
import logging
import os
from flask import Flask, request, jsonify

from .config import DetectorConfig
from .detector import EmergencyDetector

logger = logging.getLogger(__name__)

app = Flask(__name__)

config = DetectorConfig(
    detector_version=os.getenv("DETECTOR_VERSION", DetectorConfig.detector_version),
)
detector = EmergencyDetector()

logger.info(
    "EMERGENCY_DETECTOR_INITIALIZED",
    extra={
        "detector_version": config.detector_version,
        "category_count": len(detector.taxonomy),
        "phrase_count": detector.phrase_count,
    }
)


@app.route("/health", methods=["GET"])
def health():
    """Health check endpoint for the load balancer."""
    return jsonify({
        "status": "healthy",
        "service": "safety-service",
        "detector_version": config.detector_version,
    }), 200


@app.route("/ready", methods=["GET"])
def ready():
    """Readiness check - verifies detector is initialized."""
    if detector is None:
        return jsonify({"status": "not_ready", "reason": "detector_not_initialized"}), 503
    return jsonify({"status": "ready"}), 200


@app.route("/classify", methods=["POST"])
def classify_message():
    """Classify a message for emergency language.

    Request Body:
        {"message": "text typed by the user"}

    Response:
        {
            "is_emergency": true | false,
            "match": {"category": "...", "phrase": "..."} | null,
            "detector_version": "2023.06.15"
        }

    An empty message is valid and is never an emergency.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        logger.warning("CLASSIFY_REQUEST_INVALID", extra={"reason": "empty_body"})
        return jsonify({"error": "Request body required"}), 400

    message = data.get("message")
    if not isinstance(message, str):
        logger.warning("CLASSIFY_REQUEST_INVALID", extra={"reason": "missing_message"})
        return jsonify({"error": "Missing required field: message"}), 400

    try:
        match = detector.find_match(message)
    except Exception as e:
        logger.error(
            "CLASSIFY_ERROR",
            extra={
                "error": str(e),
                "error_type": type(e).__name__,
            }
        )
        return jsonify({"error": "Classification failed"}), 500

    if match is not None:
        logger.warning(
            "CLASSIFY_EMERGENCY",
            extra={
                "category": match.category,
                "message_length": len(message),
                "detector_version": config.detector_version,
            }
        )

    return jsonify({
        "is_emergency": match is not None,
        "match": match.to_dict() if match else None,
        "detector_version": config.detector_version,
    }), 200


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    port = int(os.getenv("PORT", "8001"))
    app.run(host="0.0.0.0", port=port, debug=False)
