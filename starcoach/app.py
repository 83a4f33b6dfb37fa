# app.py
import logging
import os
import socket
import sys

from flask import Flask
from flask_cors import CORS

from config import settings
from models.interview_state import InterviewSessionController, SessionRegistry
from models.records import db
from routes.debug_routes import debug_bp
from routes.interview_routes import interview_bp
from routes.ws_routes import broadcast_state, socketio
from services.ai_service import AIService
from services.document_analyzer import DocumentAnalyzer
from services.document_store import DocumentStore
from services.resume_condenser import ResumeCondenser
from services.response_evaluator import ResponseEvaluator
from services.session_repository import SessionRepository
from services.speech_service import SpeechService


def create_app(overrides: dict = None, generator=None, transcriber=None) -> Flask:
    """Build the app; tests pass a fake generator/transcriber and an in-memory database."""
    app = Flask(__name__)
    CORS(app)
    app.config.update(
        SQLALCHEMY_DATABASE_URI=settings.DATABASE_URL,
        OWNER_ID=settings.OWNER_ID,
        QUESTION_COUNT=settings.QUESTION_COUNT,
        PRINCIPLE_COUNT=settings.PRINCIPLE_COUNT,
        FOCUS_QUESTION_LIMIT=settings.FOCUS_QUESTION_LIMIT,
        CONDENSED_RESUME_MAX_WORDS=settings.CONDENSED_RESUME_MAX_WORDS,
        MIN_SUGGESTED_ANSWER_WORDS=settings.MIN_SUGGESTED_ANSWER_WORDS,
        EVAL_MAX_ATTEMPTS=settings.EVAL_MAX_ATTEMPTS,
    )
    if overrides:
        app.config.update(overrides)

    db.init_app(app)
    with app.app_context():
        db.create_all()

    generator = generator or AIService()
    documents = DocumentStore()
    sessions = SessionRepository()
    analyzer = DocumentAnalyzer(generator,
                                principle_count=app.config["PRINCIPLE_COUNT"],
                                question_count=app.config["QUESTION_COUNT"])
    condenser = ResumeCondenser(generator, max_words=app.config["CONDENSED_RESUME_MAX_WORDS"])
    evaluator = ResponseEvaluator(generator,
                                  min_suggested_words=app.config["MIN_SUGGESTED_ANSWER_WORDS"],
                                  max_attempts=app.config["EVAL_MAX_ATTEMPTS"])

    def build_controller(owner_id, listeners):
        return InterviewSessionController(
            owner_id,
            documents=documents,
            sessions=sessions,
            analyzer=analyzer,
            condenser=condenser,
            evaluator=evaluator,
            question_count=app.config["QUESTION_COUNT"],
            focus_limit=app.config["FOCUS_QUESTION_LIMIT"],
            listeners=listeners,
        )

    registry = SessionRegistry(build_controller)
    registry.add_listener(broadcast_state)

    app.extensions["generator"] = generator
    app.extensions["transcriber"] = transcriber or SpeechService()
    app.extensions["session_repository"] = sessions
    app.extensions["interview_sessions"] = registry

    # Register blueprints
    app.register_blueprint(interview_bp)
    app.register_blueprint(debug_bp)

    # --- SocketIO setup ---
    socketio.init_app(app, cors_allowed_origins="*", async_mode="threading")
    return app


if __name__ == "__main__":
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    def _pick_port(default_port: int) -> int:
        env_port = os.getenv("PORT")
        cli_port = None
        for a in sys.argv[1:]:
            if a.startswith("--port="):
                try:
                    cli_port = int(a.split("=", 1)[1])
                except ValueError:
                    cli_port = None
        if cli_port:
            base = cli_port
        elif env_port:
            try:
                base = int(env_port)
            except ValueError:
                base = default_port
        else:
            base = default_port
        for p in range(base, base + 20):
            s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            try:
                s.bind(("0.0.0.0", p))
                return p
            except OSError:
                continue
            finally:
                s.close()
        return base

    app = create_app()
    port = _pick_port(8000)
    socketio.run(app, host="0.0.0.0", port=port, debug=False)
