# src/design_auditor/engine.py
import logging
from typing import List, Optional, Sequence

from .core.managers.config_manager import config_manager
from .core.utils.numbers import round_to
from .model import AnalysisStats, AnalysisSummary, RuleDefinition, ScoreResult, Violation, ViolationCounts
from .rules.base import RuleChecker
from .rules.catalogue import RuleCatalogue
from .rules.predicates import has_auto_layout, is_component, is_default_name, is_frame
from .tree.context import CheckContext, TreeIndex
from .tree.core import DesignNode

logger = logging.getLogger(__name__)

DEFAULT_PROGRESS_INTERVAL = 100


class RuleEngine:
    """
    Rule engine for auditing design trees.

    It flattens the tree once, builds a CheckContext for every frame and
    applies every rule of the catalogue to it. Components and instances get
    only the rules flagged `applies_to_components` (layer abuse). A rule
    that raises is logged and counted, never allowed to abort the analysis.
    """

    def __init__(self, catalogue: RuleCatalogue, progress_log_interval: Optional[int] = None):
        """
        Args:
            catalogue: The (immutable) rules to apply.
            progress_log_interval: Log progress every N frames. Defaults to
                                   'analysis.progress_log_interval' from settings.
        """
        self.catalogue = catalogue
        if progress_log_interval is None:
            progress_log_interval = config_manager.get_nested(
                "analysis.progress_log_interval", DEFAULT_PROGRESS_INTERVAL
            )
        self.progress_log_interval = max(1, int(progress_log_interval))

    @property
    def rules_count(self) -> int:
        return len(self.catalogue)

    def rule_definitions(self) -> List[RuleDefinition]:
        return self.catalogue.definitions()

    def analyze(self, root: DesignNode, project_id: str) -> AnalysisSummary:
        """
        Runs the full rule catalogue over a design tree.

        Args:
            root: The root node of the document.
            project_id: Identifier of the project the document belongs to.

        Returns:
            AnalysisSummary: Violations and statistics. Scores are left zeroed
                             for the ScoreCalculator to fill in.
        """
        logger.info("Analysis started for project %s (root node %s).", project_id, root.id)

        index = TreeIndex(root)
        frames = [node for node in index.all_nodes if is_frame(node)]
        components = [node for node in index.all_nodes if is_component(node)]
        logger.info("Collected %d nodes, %d frames, %d components.", len(index), len(frames), len(components))

        violations: List[Violation] = []
        failed_checks = 0
        analyzed = 0

        # Components and instances only go through the rules that declare them
        component_rules = [rule for rule in self.catalogue if rule.applies_to_components]

        for node in index.all_nodes:
            if is_frame(node):
                rules = None
            elif is_component(node) and component_rules:
                rules = component_rules
            else:
                continue

            context = index.build_context(node)
            node_violations, node_failures = self.check_node(node, context, rules)
            violations.extend(node_violations)
            failed_checks += node_failures

            if rules is None:
                analyzed += 1
                if analyzed % self.progress_log_interval == 0:
                    logger.info("Analysis progress: %d/%d frames", analyzed, len(frames))

        logger.info("Rule checks finished: %d frames, %d violations, %d failed checks.",
                    analyzed, len(violations), failed_checks)

        summary = AnalysisSummary(
            project_id=project_id,
            total_frames=len(frames),
            analyzed_frames=analyzed,
            score_result=ScoreResult(violations=ViolationCounts.from_violations(violations)),
            violations=tuple(violations),
            stats=self.calculate_stats(index.all_nodes),
            failed_checks=failed_checks,
        )
        return summary

    def check_node(self, node: DesignNode, context: CheckContext, rules: Optional[Sequence[RuleChecker]] = None):
        """
        Applies the rules (default: the whole catalogue) to a single node.

        Returns:
            Tuple[List[Violation], int]: The violations found, and the number
                                         of rules that raised.
        """
        violations: List[Violation] = []
        failures = 0

        for rule in (self.catalogue if rules is None else rules):
            outcome = rule.evaluate(node, context)
            if outcome.is_error:
                failures += 1
                logger.error("Rule check failed (rule=%s, node=%s, name=%r): %s",
                             outcome.rule_id, outcome.node_id, node.name, outcome.error)
                continue
            violations.extend(outcome.violations)

        return violations, failures

    @staticmethod
    def calculate_stats(all_nodes: Sequence[DesignNode]) -> AnalysisStats:
        """
        Summary statistics over the flattened tree.

        The depth average uses the child count of each frame as a proxy for
        depth; it is not a re-walk of the tree.
        """
        frames = [node for node in all_nodes if is_frame(node)]

        auto_layout_frames = sum(1 for node in frames if has_auto_layout(node))
        components = sum(1 for node in all_nodes if is_component(node))
        semantic_names = sum(1 for node in frames if not is_default_name(node.name))

        depth_sum = sum(node.child_count for node in frames)
        depth_average = depth_sum / len(frames) if frames else 0.0

        return AnalysisStats(
            auto_layout_frames=auto_layout_frames,
            component_usage=components,
            semantic_names=semantic_names,
            depth_average=round_to(depth_average, 1),
        )
