# src/design_auditor/model.py
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RuleId(str, Enum):
    """Identifiers of the baseline rule catalogue."""
    AUTO_LAYOUT_REQUIRED = "AUTO_LAYOUT_REQUIRED"
    ABSOLUTE_POSITIONING = "ABSOLUTE_POSITIONING"
    FIXED_SIZE_DETECTED = "FIXED_SIZE_DETECTED"
    WRAP_OFF = "WRAP_OFF"
    NON_SEMANTIC_NAME = "NON_SEMANTIC_NAME"
    DEPTH_TOO_DEEP = "DEPTH_TOO_DEEP"
    HUG_FILL_VIOLATION = "HUG_FILL_VIOLATION"
    MIN_WIDTH_MISSING = "MIN_WIDTH_MISSING"
    COMPONENT_NOT_USED = "COMPONENT_NOT_USED"
    LAYER_ABUSE = "LAYER_ABUSE"


class RuleCategory(str, Enum):
    LAYOUT = "LAYOUT"
    SIZE = "SIZE"
    RESPONSIVE = "RESPONSIVE"
    SEMANTIC = "SEMANTIC"
    COMPONENT = "COMPONENT"


class Severity(str, Enum):
    CRITICAL = "CRITICAL"  # blocks code generation
    MAJOR = "MAJOR"
    MINOR = "MINOR"
    INFO = "INFO"


class _FrozenModel(BaseModel):
    """
    Base for all result values: immutable, serialized with camelCase keys
    for the downstream consumers, but constructible with snake_case names.
    """
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class RuleDefinition(_FrozenModel):
    """
    Static description of a rule. Created once when the catalogue is built.
    """
    id: RuleId
    name: str
    category: RuleCategory
    severity: Severity
    description: str
    impact_template: str
    score_impact: int = Field(ge=1, le=10)


class Violation(_FrozenModel):
    """
    A single rule failure recorded against one node.
    Maps directly onto the records stored by the persistence layer.
    """
    rule_id: RuleId
    rule_name: str
    severity: Severity
    category: RuleCategory
    frame_name: str
    frame_id: str
    description: str
    impact: str
    suggestion: Optional[str] = None

    # Debug information
    node_type: Optional[str] = None
    detected_value: Optional[str] = None
    expected_value: Optional[str] = None


class CategoryScore(_FrozenModel):
    category: RuleCategory
    score: int = Field(ge=0, le=100)
    max_score: int = 100
    violations: int = 0
    weight: float = Field(ge=0.0, le=1.0)


class ViolationCounts(_FrozenModel):
    critical: int = 0
    major: int = 0
    minor: int = 0
    info: int = 0

    @classmethod
    def from_violations(cls, violations) -> "ViolationCounts":
        """Counts violations per severity."""
        counts = {severity: 0 for severity in Severity}
        for violation in violations:
            counts[violation.severity] += 1
        return cls(
            critical=counts[Severity.CRITICAL],
            major=counts[Severity.MAJOR],
            minor=counts[Severity.MINOR],
            info=counts[Severity.INFO],
        )

    @property
    def total(self) -> int:
        return self.critical + self.major + self.minor + self.info


class ScoreResult(_FrozenModel):
    """
    Scores of one analysis. Zeroed by the engine, filled in by the ScoreCalculator.
    """
    overall_score: int = Field(default=0, ge=0, le=100)

    layout_score: int = 0
    size_score: int = 0
    responsive_score: int = 0
    semantic_score: int = 0
    component_score: int = 0
    category_scores: Tuple[CategoryScore, ...] = ()

    violations: ViolationCounts = Field(default_factory=ViolationCounts)

    # Gates consulted by code generation
    can_generate_code: bool = False
    can_use_grid_layout: bool = False


class AnalysisStats(_FrozenModel):
    auto_layout_frames: int = 0
    component_usage: int = 0
    semantic_names: int = 0
    depth_average: float = 0.0


class AnalysisSummary(_FrozenModel):
    """
    Output of one analysis run: violations, statistics and scores.
    A pure function of the input tree and the rule catalogue.
    """
    project_id: str
    total_frames: int = 0
    analyzed_frames: int = 0

    score_result: ScoreResult = Field(default_factory=ScoreResult)
    violations: Tuple[Violation, ...] = ()
    stats: AnalysisStats = Field(default_factory=AnalysisStats)

    # Rule invocations that raised and were recovered
    failed_checks: int = 0
