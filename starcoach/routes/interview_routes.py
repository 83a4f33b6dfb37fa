"""Main interview API routes."""
import logging

from flask import Blueprint, current_app, jsonify, request

from models.catalog import LEADERSHIP_PRINCIPLES
from services.document_parser import extract_text
from services.errors import CoachError, ValidationError

logger = logging.getLogger(__name__)

interview_bp = Blueprint('interview', __name__)


def _controller():
    owner_id = current_app.config["OWNER_ID"]
    return current_app.extensions["interview_sessions"].get(owner_id)


def _state(controller, status=200, **extra):
    body = {"ok": True, "session": controller.snapshot()}
    body.update(extra)
    return jsonify(body), status


def _json_body(stage):
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.", stage)
    return data


def _text_field(data, name, stage):
    """Optional string field; missing or null reads as "", any other type is rejected."""
    value = data.get(name)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"Field '{name}' must be a string.", stage)
    return value


@interview_bp.errorhandler(CoachError)
def handle_coach_error(e):
    body = {"ok": False}
    body.update(e.to_dict())
    owner_id = current_app.config["OWNER_ID"]
    body["session"] = current_app.extensions["interview_sessions"].get(owner_id).snapshot()
    return jsonify(body), e.http_status


@interview_bp.route('/api/session', methods=['GET'])
def get_session():
    """Current wizard state."""
    return _state(_controller())


@interview_bp.route('/api/principles', methods=['GET'])
def list_principles():
    """The closed leadership principle catalog."""
    return jsonify({
        "ok": True,
        "principles": [{"id": pid, "title": t, "description": d} for pid, t, d in LEADERSHIP_PRINCIPLES],
    }), 200


@interview_bp.route('/api/start', methods=['POST'])
def start():
    controller = _controller()
    controller.start()
    return _state(controller)


@interview_bp.route('/api/upload_documents', methods=['POST'])
def upload_documents():
    """Accept resume/job as multipart files or as JSON text, store them and analyze.

    Moves the session from landing to uploading first, so a single call is enough
    from a fresh session.
    """
    resume_text, job_text = "", ""
    resume_name, job_name = None, None

    if request.files:
        if 'resume' in request.files:
            f = request.files['resume']
            resume_name = getattr(f, 'filename', None)
            resume_text = extract_text(f.read() or b"", resume_name)
        if 'job' in request.files:
            f = request.files['job']
            job_name = getattr(f, 'filename', None)
            job_text = extract_text(f.read() or b"", job_name)
    else:
        data = _json_body("upload")
        resume_text = _text_field(data, "resume", "upload")
        job_text = _text_field(data, "job", "upload")
        resume_name = _text_field(data, "resume_filename", "upload") or None
        job_name = _text_field(data, "job_filename", "upload") or None

    if not resume_text.strip() or not job_text.strip():
        raise ValidationError("Both a resume and a job description are required.", "upload")

    controller = _controller()
    if controller.step.value == "landing":
        controller.start()
    controller.submit_documents(resume_text, job_text, resume_name, job_name)
    return _state(controller,
                  resume_chars=len(resume_text),
                  job_chars=len(job_text))


@interview_bp.route('/api/select_principle', methods=['POST'])
def select_principle():
    data = _json_body("principle_selection")
    controller = _controller()
    controller.select_principle(_text_field(data, "principle", "principle_selection") or None)
    return _state(controller)


@interview_bp.route('/api/transcribe', methods=['POST'])
def transcribe():
    """Turn a recorded answer into text; the transcript stays editable on the client."""
    if "audio" not in request.files:
        raise ValidationError("No audio file", "upload")
    blob = request.files["audio"]
    audio_bytes = blob.read() or b""
    if not audio_bytes:
        raise ValidationError("Empty audio upload", "upload")
    hint = getattr(blob, 'filename', None) or getattr(blob, 'mimetype', None) or None
    transcript = current_app.extensions["transcriber"].transcribe(audio_bytes, filename_hint=hint)
    logger.info("[STT] transcript chars=%d", len(transcript))
    return jsonify({"ok": True, "transcript": transcript}), 200


@interview_bp.route('/api/feedback', methods=['POST'])
def feedback():
    """Score the current question's transcript."""
    data = _json_body("feedback")
    controller = _controller()
    result = controller.request_feedback(
        _text_field(data, "transcript", "feedback"),
        audio_reference=data.get("audio_reference"),
    )
    return _state(controller, result=result.to_dict())


@interview_bp.route('/api/next', methods=['POST'])
def next_question():
    controller = _controller()
    controller.advance()
    return _state(controller)


@interview_bp.route('/api/reset', methods=['POST'])
def reset():
    """Start a new session."""
    controller = _controller()
    controller.reset()
    return _state(controller)


@interview_bp.route('/api/results', methods=['GET'])
def results():
    """Final aggregate and per-question breakdown."""
    controller = _controller()
    summary = controller.summary()
    saved = 0
    if controller.session_id is not None:
        saved = len(current_app.extensions["session_repository"].responses_for(controller.session_id))
    summary["saved_responses"] = saved
    return jsonify({"ok": True, "finished": controller.step.value == "final", "summary": summary}), 200
