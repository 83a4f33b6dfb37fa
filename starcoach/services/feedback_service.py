"""Session-level feedback: aggregate score and per-question breakdown."""
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

IMPROVEMENT_THRESHOLD = 70


def aggregate_score(scores) -> Optional[int]:
    """Mean of the overall scores, rounded half up; None when nothing was scored."""
    scores = list(scores)
    if not scores:
        return None
    mean = Decimal(sum(scores)) / Decimal(len(scores))
    return int(mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def performance_level(score: Optional[int]) -> str:
    if score is None:
        return "Not scored"
    if score >= 80:
        return "Excellent Performance"
    if score >= 60:
        return "Good Performance"
    return "Needs Improvement"


class FeedbackService:
    """Builds the final results view from the controller's question results."""

    @staticmethod
    def key_improvements(report, limit: int = 2) -> list:
        weak = [
            (entry.score, entry.feedback)
            for entry in (report.star.situation, report.star.task, report.star.action, report.star.result)
            if entry.score < IMPROVEMENT_THRESHOLD
        ]
        weak.sort(key=lambda item: item[0])
        return [feedback for _, feedback in weak[:limit]]

    @staticmethod
    def build_summary(results: list) -> dict:
        overall = aggregate_score(r.overall_score for r in results)
        return {
            "overall_score": overall,
            "performance_level": performance_level(overall),
            "question_count": len(results),
            "questions": [
                {
                    "question_number": r.question_number,
                    "principle": r.question.principle,
                    "question": r.question.question_text,
                    "score": r.overall_score,
                    "feedback": r.report.overall.feedback,
                    "key_improvements": FeedbackService.key_improvements(r.report),
                }
                for r in results
            ],
        }
