# src/design_auditor/rules/advanced_rules.py
"""
Tier 2 rules: structure, sizing and reuse checks that degrade the quality
of generated code without blocking it.
"""
from ..model import RuleCategory, RuleDefinition, RuleId, Severity
from ..tree.context import CheckContext
from ..tree.core import DesignNode
from .base import RuleCheckResult, RuleChecker
from .predicates import (
    LAYER_ABUSE_THRESHOLD,
    has_auto_layout,
    has_layer_abuse,
    has_min_width,
    is_component,
    is_frame,
    is_hug,
    needs_min_width,
    should_be_component,
)

MAX_DEPTH = 8
HUG_MAX_CHILDREN = 3


class DepthTooDeepRule(RuleChecker):
    """
    Rule: Frame nesting must stay within MAX_DEPTH levels.
    """

    def __init__(self):
        super().__init__(RuleDefinition(
            id=RuleId.DEPTH_TOO_DEEP,
            name="Depth Limit",
            category=RuleCategory.LAYOUT,
            severity=Severity.MAJOR,
            description=f"Keep frame nesting within {MAX_DEPTH} levels",
            impact_template="Deep nesting slows down rendering of the generated HTML/CSS",
            score_impact=5,
        ))

    def check(self, node: DesignNode, context: CheckContext) -> RuleCheckResult:
        if not is_frame(node):
            return self.passed()

        if context.depth > MAX_DEPTH:
            return self.failed(self.create_violation(
                node,
                f'Frame "{node.name}" is nested too deep (depth: {context.depth})',
                "Rendering performance drops and the structure becomes hard to maintain",
                "Flatten the structure or extract parts into components",
                f"{context.depth} levels",
                f"{MAX_DEPTH} levels or fewer",
            ))

        return self.passed()


class HugFillViolationRule(RuleChecker):
    """
    Rule: Inside an auto layout parent, a frame with many children should
    fill its container rather than hug its content.
    """

    def __init__(self):
        super().__init__(RuleDefinition(
            id=RuleId.HUG_FILL_VIOLATION,
            name="Hug/Fill Principle",
            category=RuleCategory.SIZE,
            severity=Severity.MAJOR,
            description="Use Hug contents and Fill container appropriately",
            impact_template="Inappropriate sizing modes cause broken layouts",
            score_impact=5,
        ))

    def check(self, node: DesignNode, context: CheckContext) -> RuleCheckResult:
        if not is_frame(node) or not has_auto_layout(node):
            return self.passed()

        parent = context.parent_node
        if parent is None or not has_auto_layout(parent):
            return self.passed()

        if node.child_count > HUG_MAX_CHILDREN and is_hug(node):
            return self.failed(self.create_violation(
                node,
                f'Frame "{node.name}" hugs its content despite having {node.child_count} children',
                "The layout may break when the viewport changes",
                "Switch to Fill container, or review the sizing of its children",
                "Hug contents",
                "Fill container",
            ))

        return self.passed()


class MinWidthMissingRule(RuleChecker):
    """
    Rule: Interactive elements (buttons, cards, inputs, selects) need a minimum width.
    """

    def __init__(self):
        super().__init__(RuleDefinition(
            id=RuleId.MIN_WIDTH_MISSING,
            name="Minimum Width",
            category=RuleCategory.RESPONSIVE,
            severity=Severity.MINOR,
            description="Set a minimum width for responsive behaviour",
            impact_template="Without a minimum width, elements shrink too much on mobile",
            score_impact=3,
        ))

    def check(self, node: DesignNode, context: CheckContext) -> RuleCheckResult:
        if not is_frame(node) or not has_auto_layout(node):
            return self.passed()

        if not needs_min_width(node.name):
            return self.passed()

        if not has_min_width(node):
            return self.failed(self.create_violation(
                node,
                f'Frame "{node.name}" has no minimum width',
                "The element can shrink too far on small screens and becomes hard to use",
                "Set a min width (buttons: 120px or more is recommended)",
                "Not set",
                "Min width: 120px or more",
            ))

        return self.passed()


class ComponentNotUsedRule(RuleChecker):
    """
    Rule: Reusable patterns (buttons, cards, tags...) should be components.
    """

    def __init__(self):
        super().__init__(RuleDefinition(
            id=RuleId.COMPONENT_NOT_USED,
            name="Use Components",
            category=RuleCategory.COMPONENT,
            severity=Severity.MINOR,
            description="Turn reusable patterns into components",
            impact_template="Without components, design consistency and maintainability suffer",
            score_impact=2,
        ))

    def check(self, node: DesignNode, context: CheckContext) -> RuleCheckResult:
        if not is_frame(node):
            return self.passed()

        if should_be_component(node):
            return self.failed(self.create_violation(
                node,
                f'Frame "{node.name}" looks like a reusable pattern',
                "Every copy of this design has to be maintained separately",
                "Create a component from it (Cmd/Ctrl + Option/Alt + K)",
                "Frame",
                "Component",
            ))

        return self.passed()


class LayerAbuseRule(RuleChecker):
    """
    Rule: No more than LAYER_ABUSE_THRESHOLD direct children per frame,
    component or instance.
    """
    applies_to_components = True

    def __init__(self):
        super().__init__(RuleDefinition(
            id=RuleId.LAYER_ABUSE,
            name="Layer Organisation",
            category=RuleCategory.LAYOUT,
            severity=Severity.MAJOR,
            description=f"Do not place more than {LAYER_ABUSE_THRESHOLD} layers in a single frame",
            impact_template="Too many layers slow down rendering and make maintenance hard",
            score_impact=5,
        ))

    def check(self, node: DesignNode, context: CheckContext) -> RuleCheckResult:
        if not (is_frame(node) or is_component(node)):
            return self.passed()

        if has_layer_abuse(node):
            return self.failed(self.create_violation(
                node,
                f'Frame "{node.name}" has {node.child_count} layers',
                "Rendering of the generated HTML/CSS slows down and the frame is hard to maintain",
                "Group layers, extract components, or restructure the frame",
                f"{node.child_count} layers",
                f"{LAYER_ABUSE_THRESHOLD} or fewer",
            ))

        return self.passed()
