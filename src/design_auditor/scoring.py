# src/design_auditor/scoring.py
import logging
import math
from types import MappingProxyType
from typing import Dict, List, Mapping, Sequence

from .core.utils.numbers import round_half_up
from .model import AnalysisSummary, CategoryScore, RuleCategory, ScoreResult, Severity, Violation

logger = logging.getLogger(__name__)

MAX_SCORE = 100

# Gate and presentation breakpoints
PERFECT_SCORE = 100
CODE_GENERATION_THRESHOLD = 90
GOOD_THRESHOLD = 75
FAIR_THRESHOLD = 60

SEVERITY_PENALTY: Mapping[Severity, int] = MappingProxyType({
    Severity.CRITICAL: 10,
    Severity.MAJOR: 5,
    Severity.MINOR: 2,
    Severity.INFO: 0,
})

CATEGORY_WEIGHT: Mapping[RuleCategory, float] = MappingProxyType({
    RuleCategory.LAYOUT: 0.30,
    RuleCategory.SIZE: 0.20,
    RuleCategory.RESPONSIVE: 0.25,
    RuleCategory.SEMANTIC: 0.10,
    RuleCategory.COMPONENT: 0.15,
})

if not math.isclose(sum(CATEGORY_WEIGHT.values()), 1.0):
    raise RuntimeError("Category weights must sum to 1.0")


class ScoreCalculator:
    """
    Turns the violations of an analysis into category scores, an overall
    score and the two code generation gates. Pure: no I/O, no state.
    """

    @staticmethod
    def category_weights() -> Dict[RuleCategory, float]:
        return dict(CATEGORY_WEIGHT)

    def calculate_scores(self, summary: AnalysisSummary) -> AnalysisSummary:
        """
        Returns a copy of `summary` with its score result filled in.
        Violations and stats are carried over untouched.
        """
        logger.info("Score calculation started for project %s (%d violations).",
                    summary.project_id, len(summary.violations))

        category_scores = self.calculate_category_scores(summary.violations, summary.total_frames)
        overall = self.calculate_overall_score(category_scores)
        by_category = {c.category: c.score for c in category_scores}

        score_result = ScoreResult(
            overall_score=overall,
            layout_score=by_category[RuleCategory.LAYOUT],
            size_score=by_category[RuleCategory.SIZE],
            responsive_score=by_category[RuleCategory.RESPONSIVE],
            semantic_score=by_category[RuleCategory.SEMANTIC],
            component_score=by_category[RuleCategory.COMPONENT],
            category_scores=tuple(category_scores),
            violations=summary.score_result.violations,
            can_generate_code=can_generate_code(overall),
            can_use_grid_layout=can_use_grid_layout(overall),
        )

        logger.info("Score calculation finished for project %s: score=%d, code=%s, grid=%s",
                    summary.project_id, overall,
                    score_result.can_generate_code, score_result.can_use_grid_layout)

        return summary.model_copy(update={"score_result": score_result})

    @staticmethod
    def calculate_category_scores(
            violations: Sequence[Violation],
            total_frames: int
    ) -> List[CategoryScore]:
        """
        Scores each category from 100 down by its severity penalties.

        The penalty sum is normalised by the frame count (x10), so a fixed
        number of violations weighs less in a document with many frames.
        Without frames the raw sum is used.
        """
        scores: List[CategoryScore] = []

        for category in RuleCategory:
            in_category = [v for v in violations if v.category == category]
            penalty = sum(SEVERITY_PENALTY[v.severity] for v in in_category)

            if total_frames > 0:
                normalized = (penalty / total_frames) * 10
            else:
                normalized = penalty

            score = max(0, MAX_SCORE - normalized)

            scores.append(CategoryScore(
                category=category,
                score=min(MAX_SCORE, max(0, round_half_up(score))),
                max_score=MAX_SCORE,
                violations=len(in_category),
                weight=CATEGORY_WEIGHT[category],
            ))

        return scores

    @staticmethod
    def calculate_overall_score(category_scores: Sequence[CategoryScore]) -> int:
        """Weighted average of the category scores, rounded half-up."""
        weighted = sum(c.score * c.weight for c in category_scores)
        total_weight = sum(c.weight for c in category_scores)
        overall = weighted / total_weight if total_weight > 0 else 0
        return min(MAX_SCORE, max(0, round_half_up(overall)))


# --- Gates ---

def can_generate_code(score: int) -> bool:
    return score >= CODE_GENERATION_THRESHOLD


def can_use_grid_layout(score: int) -> bool:
    return score == PERFECT_SCORE


# --- Presentation helpers (same breakpoints as the gates) ---

def score_level(score: int) -> str:
    if score == PERFECT_SCORE:
        return "Perfect"
    if score >= CODE_GENERATION_THRESHOLD:
        return "Excellent"
    if score >= GOOD_THRESHOLD:
        return "Good"
    if score >= FAIR_THRESHOLD:
        return "Needs Improvement"
    return "Poor"


def score_message(score: int) -> str:
    if score == PERFECT_SCORE:
        return "100% conformant. Grid layout generation is available."
    if score >= CODE_GENERATION_THRESHOLD:
        return "90% or more conformant. Code generation is available."
    if score >= GOOD_THRESHOLD:
        return "75% or more conformant. Basic generation works, but improvements are recommended."
    if score >= FAIR_THRESHOLD:
        return "60% or more conformant. Many improvements are needed before generating code."
    return "Less than 60% conformant. Improve the design before generating code."


def score_grade(score: int) -> str:
    if score == PERFECT_SCORE:
        return "S"
    if score >= CODE_GENERATION_THRESHOLD:
        return "A"
    if score >= GOOD_THRESHOLD:
        return "B"
    if score >= FAIR_THRESHOLD:
        return "C"
    return "D"
