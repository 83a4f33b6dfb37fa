import json

import pytest

from app import create_app
from models.interview_state import InterviewSessionController
from models.schemas import ScoreReport
from services.document_analyzer import DocumentAnalyzer
from services.errors import DocumentNotFound
from services.resume_condenser import ResumeCondenser
from services.response_evaluator import ResponseEvaluator

RESUME = (
    "Senior PM at Acme Corp (2019-2024), led 3 launches, grew revenue 40% in 18 months, "
    "ran a customer advisory board of 25 enterprise accounts."
)
JOB = "Seeking PM with customer focus, ownership of roadmap and delivery of measurable results."

PRINCIPLES = [
    ("Customer Obsession", 95),
    ("Ownership", 88),
    ("Invent and Simplify", 85),
    ("Bias for Action", 82),
    ("Deliver Results", 78),
]


def principle_payload(title, score):
    return {
        "id": title.lower().replace(" ", "-"),
        "title": title,
        "description": f"{title} for this role.",
        "relevanceScore": score,
        "keyBehaviors": ["first behavior", "second behavior", "third behavior"],
    }


def question_payload(n, principle, text=None):
    return {
        "id": f"q{n}",
        "principle": principle,
        "question": text or f"Tell me about a time you showed {principle.lower()} (#{n}).",
        "context": "Pick a recent example.",
        "starFramework": {
            "situation": "Describe the context",
            "task": "What was your responsibility?",
            "action": "What steps did you take?",
            "result": "What was the impact?",
        },
    }


def analysis_json(principles=None, questions=None):
    principles = PRINCIPLES if principles is None else principles
    if questions is None:
        questions = [question_payload(n, title) for n, (title, _) in enumerate(principles, start=1)]
    return json.dumps({
        "principles": [principle_payload(t, s) for t, s in principles],
        "questions": questions,
    })


PARAGRAPH = (
    "At Acme Corp in 2021 I owned the enterprise onboarding flow while churn among new "
    "accounts was climbing toward twelve percent each quarter."
)


def score_payload(overall=82, star=(80, 75, 85, 70), suggested=None, alignment=None):
    parts = ("situation", "task", "action", "result")
    suggested = suggested or {p: PARAGRAPH for p in parts}
    return {
        "overallScore": {"score": overall, "feedback": "Clear story, add metrics."},
        "starAnalysis": {p: {"score": s, "feedback": f"{p} feedback"} for p, s in zip(parts, star)},
        "suggestedAnswer": suggested,
        "jobAlignment": alignment or [
            "Shows customer focus the role asks for.",
            "Owns a roadmap end to end.",
            "Quantifies delivered results.",
        ],
    }


def score_json(**kwargs):
    return json.dumps(score_payload(**kwargs))


def score_report(**kwargs):
    return ScoreReport.model_validate(score_payload(**kwargs))


class FakeGenerator:
    """Scripted stand-in for the Gemini service; the last queued item for a stage repeats."""

    model = "fake-model"

    def __init__(self):
        self.calls = []
        self.responses = {
            "analyze": [analysis_json()],
            "condense": ["Senior PM, Acme Corp, 2019-2024. Grew revenue 40%."],
            "evaluate": [score_json()],
            "debug": ["OK"],
        }

    def queue(self, stage, *items):
        self.responses[stage] = list(items)

    def count(self, stage=None):
        return len([c for c in self.calls if stage is None or c["stage"] == stage])

    def complete(self, system_prompt, user_prompt, json_mode=True, max_tokens=2000,
                 temperature=0.4, model=None, stage="llm"):
        self.calls.append({
            "stage": stage,
            "system_prompt": system_prompt,
            "user_prompt": user_prompt,
            "json_mode": json_mode,
            "model": model,
        })
        queue = self.responses[stage]
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item


class FakeTranscriber:
    def __init__(self, text="I worked with a customer who was about to churn."):
        self.text = text
        self.calls = []

    def transcribe(self, audio_bytes, filename_hint=None):
        self.calls.append((audio_bytes, filename_hint))
        return self.text


class MemoryDocuments:
    def __init__(self):
        self.rows = []
        self.fail_on_kind = None

    def put(self, owner_id, kind, text, filename=None):
        if kind == self.fail_on_kind:
            from services.errors import StorageFailure
            raise StorageFailure("disk full", "documents")
        self.rows.append((owner_id, kind, text, filename))
        return len(self.rows)

    def latest(self, owner_id, kind):
        for row in reversed(self.rows):
            if row[0] == owner_id and row[1] == kind:
                return row[2]
        raise DocumentNotFound(f"No {kind}")


class MemorySessions:
    def __init__(self):
        self.created = 0
        self.get_calls = 0
        self.open_ids = {}
        self.completed = []
        self.saved = []

    def get_or_create_in_progress(self, owner_id):
        self.get_calls += 1
        if owner_id not in self.open_ids:
            self.created += 1
            self.open_ids[owner_id] = self.created
        return self.open_ids[owner_id]

    def complete(self, session_id):
        self.completed.append(session_id)
        for owner, sid in list(self.open_ids.items()):
            if sid == session_id:
                del self.open_ids[owner]

    def save_response(self, **kwargs):
        self.saved.append(kwargs)
        return len(self.saved)


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def transcriber():
    return FakeTranscriber()


@pytest.fixture
def documents():
    return MemoryDocuments()


@pytest.fixture
def sessions():
    return MemorySessions()


@pytest.fixture
def controller(generator, documents, sessions):
    return InterviewSessionController(
        "owner-1",
        documents=documents,
        sessions=sessions,
        analyzer=DocumentAnalyzer(generator, principle_count=5, question_count=5),
        condenser=ResumeCondenser(generator, max_words=3000),
        evaluator=ResponseEvaluator(generator, min_suggested_words=12, max_attempts=2),
        question_count=5,
        focus_limit=3,
    )


@pytest.fixture
def app(generator, transcriber):
    app = create_app(
        {"TESTING": True, "SQLALCHEMY_DATABASE_URI": "sqlite://", "OWNER_ID": "test-user"},
        generator=generator,
        transcriber=transcriber,
    )
    yield app


@pytest.fixture
def client(app):
    return app.test_client()
