# src/design_auditor/rules/catalogue.py
import logging
from typing import Iterable, Iterator, List, Optional, Tuple

from ..model import RuleDefinition, RuleId
from .advanced_rules import (
    ComponentNotUsedRule,
    DepthTooDeepRule,
    HugFillViolationRule,
    LayerAbuseRule,
    MinWidthMissingRule,
)
from .base import RuleChecker
from .core_rules import (
    AbsolutePositioningRule,
    AutoLayoutRequiredRule,
    FixedSizeDetectedRule,
    NonSemanticNameRule,
    WrapOffRule,
)

logger = logging.getLogger(__name__)


class RuleCatalogue:
    """
    Fixed, ordered set of rule checkers.

    The catalogue is immutable after construction and its rules are
    stateless, so one instance can be shared by concurrent analyses.
    """

    __slots__ = ("_rules",)

    def __init__(self, rules: Iterable[RuleChecker]):
        rules = tuple(rules)

        seen = set()
        for rule in rules:
            if rule.rule_id in seen:
                raise ValueError(f"Duplicate rule id in catalogue: {rule.rule_id}")
            seen.add(rule.rule_id)

        object.__setattr__(self, "_rules", rules)

    def __setattr__(self, key, value):
        raise AttributeError("RuleCatalogue is immutable")

    def __iter__(self) -> Iterator[RuleChecker]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    @property
    def rules(self) -> Tuple[RuleChecker, ...]:
        return self._rules

    def get(self, rule_id: RuleId) -> Optional[RuleChecker]:
        """Retrieves the checker for a specific rule id."""
        for rule in self._rules:
            if rule.definition.id == rule_id:
                return rule
        return None

    def definitions(self) -> List[RuleDefinition]:
        """Returns the definitions of all rules, in catalogue order."""
        return [rule.definition for rule in self._rules]

    def rule_ids(self) -> List[str]:
        return [rule.rule_id for rule in self._rules]


def default_catalogue() -> RuleCatalogue:
    """
    Builds the baseline catalogue: five core rules followed by five advanced rules.
    """
    catalogue = RuleCatalogue([
        # --- Core ---
        AutoLayoutRequiredRule(),
        AbsolutePositioningRule(),
        FixedSizeDetectedRule(),
        WrapOffRule(),
        NonSemanticNameRule(),

        # --- Advanced ---
        DepthTooDeepRule(),
        HugFillViolationRule(),
        MinWidthMissingRule(),
        ComponentNotUsedRule(),
        LayerAbuseRule(),
    ])
    logger.debug("Rule catalogue built with %d rules.", len(catalogue))
    return catalogue
