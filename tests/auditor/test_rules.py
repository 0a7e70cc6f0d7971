# tests/auditor/test_rules.py
import pytest

from design_auditor.model import RuleCategory, RuleId, Severity
from design_auditor.rules.advanced_rules import (
    MAX_DEPTH,
    ComponentNotUsedRule,
    DepthTooDeepRule,
    HugFillViolationRule,
    LayerAbuseRule,
    MinWidthMissingRule,
)
from design_auditor.rules.base import RuleCheckResult, RuleChecker, RuleOutcome
from design_auditor.rules.catalogue import RuleCatalogue
from design_auditor.rules.core_rules import (
    AbsolutePositioningRule,
    AutoLayoutRequiredRule,
    FixedSizeDetectedRule,
    NonSemanticNameRule,
    WrapOffRule,
)
from design_auditor.rules.predicates import LAYER_ABUSE_THRESHOLD
from design_auditor.tree.core import (
    AxisSizingMode,
    BoundingBox,
    LayoutMode,
    LayoutWrap,
    NodeType,
)


def _check(rule, node, context_for, root=None):
    return rule.check(node, context_for(node, root))


# --- Catalogue ---

def test_default_catalogue_order(catalogue):
    assert catalogue.rule_ids() == [r.value for r in RuleId]
    assert len(catalogue) == 10


def test_catalogue_definitions(catalogue):
    defs = {d.id: d for d in catalogue.definitions()}

    assert defs[RuleId.AUTO_LAYOUT_REQUIRED].severity == Severity.CRITICAL
    assert defs[RuleId.ABSOLUTE_POSITIONING].category == RuleCategory.LAYOUT
    assert defs[RuleId.WRAP_OFF].category == RuleCategory.RESPONSIVE
    assert defs[RuleId.MIN_WIDTH_MISSING].score_impact == 3
    assert defs[RuleId.COMPONENT_NOT_USED].category == RuleCategory.COMPONENT
    assert all(1 <= d.score_impact <= 10 for d in defs.values())


def test_catalogue_lookup(catalogue):
    assert isinstance(catalogue.get(RuleId.WRAP_OFF), WrapOffRule)
    assert RuleCatalogue([]).get(RuleId.WRAP_OFF) is None


def test_catalogue_is_immutable(catalogue):
    with pytest.raises(AttributeError):
        catalogue._rules = ()


def test_catalogue_rejects_duplicates():
    with pytest.raises(ValueError, match="Duplicate"):
        RuleCatalogue([WrapOffRule(), WrapOffRule()])


# --- Non-frames are ignored by every rule ---

@pytest.mark.parametrize("node_type", [NodeType.GROUP, NodeType.TEXT, NodeType.RECTANGLE])
def test_rules_skip_non_frames(catalogue, make_node, context_for, node_type):
    node = make_node(name="Group 1", type=node_type)
    for rule in catalogue:
        assert _check(rule, node, context_for).passed, rule


# --- Core rules ---

def test_auto_layout_required(make_node, make_frame, context_for):
    rule = AutoLayoutRequiredRule()

    result = _check(rule, make_node(name="hero"), context_for)
    assert not result.passed
    violation = result.violations[0]
    assert violation.rule_id == RuleId.AUTO_LAYOUT_REQUIRED
    assert violation.severity == Severity.CRITICAL
    assert violation.frame_name == "hero"
    assert violation.node_type == "FRAME"
    assert violation.detected_value == "NONE"

    assert _check(rule, make_frame(), context_for).passed


def test_absolute_positioning(make_node, make_frame, context_for):
    rule = AbsolutePositioningRule()

    assert not _check(rule, make_node(), context_for).passed
    assert _check(rule, make_frame(), context_for).passed

    scaled = make_frame(constraints={"horizontal": "SCALE", "vertical": "TOP"})
    assert not _check(rule, scaled, context_for).passed


def test_fixed_size_detected_reports_rounded_size(make_node, context_for):
    node = make_node(absolute_bounding_box=BoundingBox(width=320.5, height=99.4))

    result = _check(FixedSizeDetectedRule(), node, context_for)

    assert not result.passed
    assert result.violations[0].detected_value == "321px × 99px"


def test_fixed_size_detected_on_fixed_axis(make_frame, context_for):
    node = make_frame(primary_axis_sizing_mode=AxisSizingMode.FIXED)

    result = _check(FixedSizeDetectedRule(), node, context_for)

    assert not result.passed
    assert result.violations[0].detected_value == "Fixed"


def test_fixed_size_passes_for_hug(make_frame, context_for):
    node = make_frame(primary_axis_sizing_mode=AxisSizingMode.AUTO,
                      counter_axis_sizing_mode=AxisSizingMode.AUTO)
    assert _check(FixedSizeDetectedRule(), node, context_for).passed


def test_wrap_off(make_frame, make_text, context_for):
    rule = WrapOffRule()

    three = make_frame(layout_wrap=LayoutWrap.NO_WRAP, children=[make_text() for _ in range(3)])
    two = make_frame(children=[make_text() for _ in range(2)])
    wrapped = make_frame(layout_wrap=LayoutWrap.WRAP, children=[make_text() for _ in range(5)])

    result = _check(rule, three, context_for)
    assert not result.passed
    assert "3 children" in result.violations[0].description

    assert _check(rule, two, context_for).passed
    assert _check(rule, wrapped, context_for).passed


def test_wrap_off_ignores_frames_without_auto_layout(make_node, make_text, context_for):
    node = make_node(children=[make_text() for _ in range(4)])
    assert _check(WrapOffRule(), node, context_for).passed


def test_non_semantic_name(make_frame, context_for):
    rule = NonSemanticNameRule()

    result = _check(rule, make_frame(name="Frame 12"), context_for)
    assert not result.passed
    assert result.violations[0].detected_value == "Frame 12"
    assert result.violations[0].severity == Severity.MINOR

    assert _check(rule, make_frame(name="section-hero"), context_for).passed


# --- Advanced rules ---

def test_depth_too_deep(make_frame, context_for):
    rule = DepthTooDeepRule()

    node = leaf = make_frame(name="leaf")
    for _ in range(MAX_DEPTH):
        node = make_frame(children=[node])
    at_limit_root = node

    assert context_for(leaf, at_limit_root).depth == MAX_DEPTH
    assert _check(rule, leaf, context_for, at_limit_root).passed

    deeper_root = make_frame(children=[at_limit_root])
    result = _check(rule, leaf, context_for, deeper_root)
    assert not result.passed
    assert result.violations[0].detected_value == f"{MAX_DEPTH + 1} levels"


def test_hug_fill_violation(make_frame, make_text, context_for):
    rule = HugFillViolationRule()
    hugging = make_frame(primary_axis_sizing_mode=AxisSizingMode.AUTO,
                         children=[make_text() for _ in range(4)])

    in_auto_layout = make_frame(children=[hugging])
    assert not _check(rule, hugging, context_for, in_auto_layout).passed

    in_plain_frame = make_frame(layout_mode=LayoutMode.NONE, children=[hugging])
    assert _check(rule, hugging, context_for, in_plain_frame).passed

    # No parent at all
    assert _check(rule, hugging, context_for).passed


def test_hug_fill_respects_child_threshold(make_frame, make_text, context_for):
    few = make_frame(primary_axis_sizing_mode=AxisSizingMode.AUTO,
                     children=[make_text() for _ in range(3)])
    parent = make_frame(children=[few])

    assert _check(HugFillViolationRule(), few, context_for, parent).passed


def test_min_width_missing(make_frame, context_for):
    rule = MinWidthMissingRule()

    result = _check(rule, make_frame(name="button-primary"), context_for)
    assert not result.passed
    assert result.violations[0].rule_id == RuleId.MIN_WIDTH_MISSING

    with_min = make_frame(name="button-primary", min_width=120)
    assert _check(rule, with_min, context_for).passed

    hugging = make_frame(name="input-email", counter_axis_sizing_mode=AxisSizingMode.AUTO)
    assert _check(rule, hugging, context_for).passed

    assert _check(rule, make_frame(name="header"), context_for).passed


def test_component_not_used(make_frame, make_node, context_for):
    rule = ComponentNotUsedRule()

    result = _check(rule, make_frame(name="card-product"), context_for)
    assert not result.passed
    assert result.violations[0].expected_value == "Component"

    assert _check(rule, make_frame(name="header"), context_for).passed
    # Components are not frames, so they are never flagged
    assert _check(rule, make_node(name="card", type=NodeType.COMPONENT), context_for).passed


def test_layer_abuse(make_frame, make_node, make_text, context_for):
    rule = LayerAbuseRule()
    crowded = [make_text() for _ in range(LAYER_ABUSE_THRESHOLD + 1)]

    result = _check(rule, make_frame(children=crowded), context_for)
    assert not result.passed
    assert result.violations[0].detected_value == f"{LAYER_ABUSE_THRESHOLD + 1} layers"

    instance = make_node(name="list", type=NodeType.INSTANCE, children=crowded)
    assert not _check(rule, instance, context_for).passed

    assert _check(rule, make_frame(children=crowded[:LAYER_ABUSE_THRESHOLD]), context_for).passed


# --- Recoverable outcomes ---

class _ExplodingRule(RuleChecker):
    def __init__(self):
        super().__init__(AutoLayoutRequiredRule().definition)

    def check(self, node, context):
        raise KeyError("boom")


def test_evaluate_captures_errors(make_frame, context_for):
    node = make_frame()

    outcome = _ExplodingRule().evaluate(node, context_for(node))

    assert outcome.is_error
    assert outcome.violations == ()
    assert outcome.node_id == node.id
    assert "KeyError" in outcome.error


def test_evaluate_wraps_results(make_node, context_for):
    node = make_node(name="hero")

    outcome = AutoLayoutRequiredRule().evaluate(node, context_for(node))

    assert not outcome.is_error
    assert outcome.rule_id == "AUTO_LAYOUT_REQUIRED"
    assert len(outcome.violations) == 1


def test_passed_outcome_has_no_violations():
    outcome = RuleOutcome.ok("WRAP_OFF", "1:1", RuleCheckResult(passed=True))
    assert outcome.violations == ()
