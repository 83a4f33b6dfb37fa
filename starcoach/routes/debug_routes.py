"""Debug and testing routes."""
from flask import Blueprint, current_app, jsonify

from config import settings
from services.errors import CoachError

debug_bp = Blueprint('debug', __name__)


@debug_bp.route('/api/debug_llm', methods=['GET'])
def debug_llm():
    """Test the generation service connection."""
    generator = current_app.extensions["generator"]
    try:
        txt = generator.complete(
            "You are a connectivity check.",
            "Say OK.",
            json_mode=False,
            max_tokens=10,
            temperature=0.1,
            stage="debug",
        )
        return jsonify({
            "ok": True,
            "model": getattr(generator, "model", None),
            "text": txt,
            "mode": "vertex" if settings.USE_VERTEX == "1" else "aistudio"
        }), 200
    except CoachError as e:
        return jsonify({"ok": False, "model": getattr(generator, "model", None), "error": e.message}), 500
