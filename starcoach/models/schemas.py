"""Response-shape contracts for the generation stages.

Attribute names are snake_case; aliases carry the camelCase keys the prompts ask the
model to emit and the HTTP layer returns to the browser.
"""
from typing import Annotated, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

Score = Annotated[int, Field(ge=0, le=100)]
NonEmptyStr = Annotated[str, Field(min_length=1)]


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class LeadershipPrinciple(_Schema):
    id: str = ""
    title: NonEmptyStr
    description: str = ""
    relevance_score: Score = Field(alias="relevanceScore")
    key_behaviors: List[NonEmptyStr] = Field(alias="keyBehaviors", min_length=1)


class StarHints(_Schema):
    """Prompts for what to cover in each STAR part, not sample answers."""

    situation: str = ""
    task: str = ""
    action: str = ""
    result: str = ""


class Question(_Schema):
    id: str = ""
    principle: NonEmptyStr
    question_text: NonEmptyStr = Field(alias="question")
    context: str = ""
    star_framework: StarHints = Field(alias="starFramework", default_factory=StarHints)


class AnalysisResult(_Schema):
    principles: List[LeadershipPrinciple] = Field(min_length=1)
    questions: List[Question] = Field(default_factory=list)


class ScoreEntry(_Schema):
    score: Score
    feedback: NonEmptyStr


class StarAnalysis(_Schema):
    situation: ScoreEntry
    task: ScoreEntry
    action: ScoreEntry
    result: ScoreEntry


class SuggestedAnswer(_Schema):
    situation: NonEmptyStr
    task: NonEmptyStr
    action: NonEmptyStr
    result: NonEmptyStr

    def components(self):
        return [
            ("situation", self.situation),
            ("task", self.task),
            ("action", self.action),
            ("result", self.result),
        ]


class ScoreReport(_Schema):
    overall: ScoreEntry = Field(alias="overallScore")
    star: StarAnalysis = Field(alias="starAnalysis")
    suggested_answer: SuggestedAnswer = Field(alias="suggestedAnswer")
    job_alignment: List[NonEmptyStr] = Field(alias="jobAlignment", min_length=3)

    @field_validator("job_alignment")
    @classmethod
    def _keep_five(cls, v):
        return v[:5]

    @property
    def overall_score(self) -> int:
        return self.overall.score
