import logging
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd
from tqdm.auto import tqdm

from design_auditor.core.managers.config_manager import config_manager
from design_auditor.engine import RuleEngine
from design_auditor.errors import DesignAuditorError
from design_auditor.model import AnalysisSummary
from design_auditor.rules.catalogue import RuleCatalogue, default_catalogue
from design_auditor.scoring import ScoreCalculator, score_grade, score_level, score_message
from design_auditor.tree.builder import TreeBuilder
from design_auditor.tree.core import DesignNode
from design_auditor.tree.models import DesignDocument

logger = logging.getLogger(__name__)

DocumentInput = Union[DesignDocument, DesignNode, Mapping[str, Any], str, bytes]

VIOLATION_COLUMNS = [
    "Project", "Frame", "Frame ID", "Node Type", "Rule", "Rule Name",
    "Category", "Severity", "Description", "Impact", "Suggestion", "Detected", "Expected",
]


def _worker_analyze_document(
        task: Tuple[str, DocumentInput],
        engine: RuleEngine,
        calculator: ScoreCalculator,
        builder: TreeBuilder
) -> Dict[str, Any]:
    """
    Worker function to analyze a single document.
    Returns {"summary": ...} or {"error": ..., "project_id": ...}.
    """
    project_id, document = task
    try:
        root = _resolve_root(document, builder)
        summary = engine.analyze(root, project_id)
        return {"summary": calculator.calculate_scores(summary)}
    except DesignAuditorError as e:
        logger.error("Analysis failed for project %s: %s", project_id, e)
        return {"error": str(e), "project_id": project_id}
    except Exception as e:
        logger.error("Worker failed on project %s: %s", project_id, e, exc_info=True)
        return {"error": str(e), "project_id": project_id}


def _resolve_root(document: DocumentInput, builder: TreeBuilder) -> DesignNode:
    if isinstance(document, DesignNode):
        return document
    if isinstance(document, DesignDocument):
        return document.document
    return builder.parse_doc(document).document


class AnalysisController:
    """
    Orchestrates the analysis of design documents: tree building, rule
    evaluation, scoring, batch execution and export of the results.

    One rule catalogue is built at construction and shared by every
    analysis this controller runs, including concurrent ones.
    """

    def __init__(
            self,
            catalogue: Optional[RuleCatalogue] = None,
            calculator: Optional[ScoreCalculator] = None,
            builder: Optional[TreeBuilder] = None
    ):
        self.catalogue = catalogue if catalogue is not None else default_catalogue()
        self.engine = RuleEngine(self.catalogue)
        self.calculator = calculator or ScoreCalculator()
        self.builder = builder or TreeBuilder()

        # Results Buffers
        self.failed_documents: List[Dict[str, Any]] = []

    def analyze_document(self, document: DocumentInput, project_id: str) -> AnalysisSummary:
        """
        Analyzes and scores one document.

        Args:
            document: A DesignDocument, a root DesignNode, or the raw file payload.
            project_id: The project the document belongs to.

        Raises:
            TreeBuildError: If a raw payload cannot be parsed.
        """
        root = _resolve_root(document, self.builder)
        summary = self.engine.analyze(root, project_id)
        summary = self.calculator.calculate_scores(summary)

        logger.info(
            "Analysis complete for project %s: score=%d (%s), violations=%d, code generation=%s",
            project_id,
            summary.score_result.overall_score,
            score_grade(summary.score_result.overall_score),
            len(summary.violations),
            summary.score_result.can_generate_code,
        )
        return summary

    def analyze_batch(
            self,
            documents: Sequence[Tuple[str, DocumentInput]],
            workers: Optional[int] = None,
            progress_callback=None,
            show_progress: bool = False
    ) -> List[AnalysisSummary]:
        """
        Analyzes independent documents concurrently.

        A document that fails to build or analyze is logged and skipped;
        its error is kept in `failed_documents`.

        Args:
            documents: (project_id, document) pairs.
            workers: Pool size. Defaults to 'analysis.batch_workers' from settings.
            progress_callback: Called as progress_callback(done, total).
            show_progress: Show a tqdm progress bar while the batch runs.

        Returns:
            The summaries of the successful analyses, in input order.
        """
        total = len(documents)
        workers = workers or config_manager.get_nested("analysis.batch_workers", 4)

        # Reset Buffers
        self.failed_documents = []
        summaries: List[AnalysisSummary] = []

        func = partial(
            _worker_analyze_document,
            engine=self.engine,
            calculator=self.calculator,
            builder=self.builder,
        )

        with ThreadPoolExecutor(max_workers=max(1, int(workers))) as executor:
            results = executor.map(func, documents)
            if show_progress:
                results = tqdm(results, total=total, desc="Analyzing", unit="document", leave=False)

            for i, result in enumerate(results):
                if progress_callback:
                    progress_callback(i + 1, total)

                if "error" in result:
                    self.failed_documents.append(result)
                    continue
                summaries.append(result["summary"])

        logger.info("Batch analysis finished: %d/%d documents analyzed, %d failed.",
                    len(summaries), total, len(self.failed_documents))
        return summaries

    # --- Export ---

    @staticmethod
    def violations_to_dataframe(summary: AnalysisSummary) -> pd.DataFrame:
        """One row per violation, for tabular export."""
        rows = [
            {
                "Project": summary.project_id,
                "Frame": v.frame_name,
                "Frame ID": v.frame_id,
                "Node Type": v.node_type,
                "Rule": v.rule_id.value,
                "Rule Name": v.rule_name,
                "Category": v.category.value,
                "Severity": v.severity.value,
                "Description": v.description,
                "Impact": v.impact,
                "Suggestion": v.suggestion,
                "Detected": v.detected_value,
                "Expected": v.expected_value,
            }
            for v in summary.violations
        ]
        return pd.DataFrame(rows, columns=VIOLATION_COLUMNS)

    @staticmethod
    def category_breakdown(summary: AnalysisSummary) -> pd.DataFrame:
        """Per category score, weight and violation count."""
        rows = [
            {
                "category": c.category.value,
                "score": c.score,
                "max_score": c.max_score,
                "weight": c.weight,
                "violations": c.violations,
            }
            for c in summary.score_result.category_scores
        ]
        return pd.DataFrame(rows, columns=["category", "score", "max_score", "weight", "violations"])

    @staticmethod
    def summary_to_json(summary: AnalysisSummary, indent: Optional[int] = 2) -> str:
        """Serializes a summary with the camelCase keys the consumers expect."""
        return summary.model_dump_json(by_alias=True, indent=indent)

    @staticmethod
    def describe(summary: AnalysisSummary) -> Dict[str, Any]:
        """Presentation values derived from the overall score."""
        score = summary.score_result.overall_score
        return {
            "score": score,
            "grade": score_grade(score),
            "level": score_level(score),
            "message": score_message(score),
            "canGenerateCode": summary.score_result.can_generate_code,
            "canUseGridLayout": summary.score_result.can_use_grid_layout,
        }
