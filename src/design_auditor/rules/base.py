# src/design_auditor/rules/base.py
import abc
from dataclasses import dataclass
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict

from ..model import RuleDefinition, Violation
from ..tree.context import CheckContext
from ..tree.core import DesignNode


class RuleCheckResult(BaseModel):
    """Outcome of one rule against one node."""
    model_config = ConfigDict(frozen=True)

    passed: bool
    violations: Tuple[Violation, ...] = ()


@dataclass(frozen=True)
class RuleOutcome:
    """
    Recoverable result of invoking a rule: either a normal check result,
    or a captured error marker that callers log and treat as "no violations".
    """
    rule_id: str
    node_id: str
    result: Optional[RuleCheckResult] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, rule_id: str, node_id: str, result: RuleCheckResult) -> "RuleOutcome":
        return cls(rule_id=rule_id, node_id=node_id, result=result)

    @classmethod
    def failure(cls, rule_id: str, node_id: str, error: BaseException) -> "RuleOutcome":
        return cls(rule_id=rule_id, node_id=node_id, error=f"{type(error).__name__}: {error}")

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def violations(self) -> Tuple[Violation, ...]:
        if self.result is None or self.result.passed:
            return ()
        return self.result.violations


class RuleChecker(metaclass=abc.ABCMeta):
    """
    Abstract base class for all rules.

    Every rule carries an immutable RuleDefinition and implements `check`.
    Rules must be stateless and side-effect free: they only read the node
    and its context, so one instance can be shared across analyses.
    """

    # Whether the engine also runs this rule on component and instance nodes
    applies_to_components = False

    def __init__(self, definition: RuleDefinition):
        self._definition = definition

    @property
    def definition(self) -> RuleDefinition:
        return self._definition

    @property
    def rule_id(self) -> str:
        return self._definition.id.value

    @abc.abstractmethod
    def check(self, node: DesignNode, context: CheckContext) -> RuleCheckResult:
        """
        Checks a single node.

        Args:
            node: The node under evaluation.
            context: Depth, parent and tree information for the node.

        Returns:
            A passing result, or a failed result carrying one or more violations.
        """
        raise NotImplementedError("Every rule must implement a 'check' method.")

    def evaluate(self, node: DesignNode, context: CheckContext) -> RuleOutcome:
        """
        Runs `check` and captures any exception as an error outcome,
        so a misbehaving rule never aborts an analysis.
        """
        try:
            result = self.check(node, context)
        except Exception as e:
            return RuleOutcome.failure(self.rule_id, node.id, e)
        return RuleOutcome.ok(self.rule_id, node.id, result)

    # --- Result helpers ---

    @staticmethod
    def passed() -> RuleCheckResult:
        return RuleCheckResult(passed=True)

    @staticmethod
    def failed(*violations: Violation) -> RuleCheckResult:
        return RuleCheckResult(passed=False, violations=violations)

    def create_violation(
            self,
            node: DesignNode,
            description: str,
            impact: str,
            suggestion: Optional[str] = None,
            detected_value: Optional[str] = None,
            expected_value: Optional[str] = None
    ) -> Violation:
        """Creates a violation stamped with this rule's id, name, severity and category."""
        return Violation(
            rule_id=self._definition.id,
            rule_name=self._definition.name,
            severity=self._definition.severity,
            category=self._definition.category,
            frame_name=node.name,
            frame_id=node.id,
            description=description,
            impact=impact,
            suggestion=suggestion,
            node_type=node.type.value,
            detected_value=detected_value,
            expected_value=expected_value,
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.rule_id}>"
