# src/design_auditor/rules/core_rules.py
"""
Tier 1 rules: the structural checks that decide whether a frame can be
converted to responsive markup at all.
"""
from ..core.utils.numbers import round_half_up
from ..model import RuleCategory, RuleDefinition, RuleId, Severity
from ..tree.context import CheckContext
from ..tree.core import DesignNode
from .base import RuleCheckResult, RuleChecker
from .predicates import (
    has_absolute_positioning,
    has_auto_layout,
    has_fixed_size,
    has_wrap_enabled,
    is_frame,
    is_semantic_name,
)

WRAP_MIN_CHILDREN = 3


class AutoLayoutRequiredRule(RuleChecker):
    """
    Rule: Every frame must use auto layout.
    Flexbox output is derived from auto layout, so without it no code can be generated.
    """

    def __init__(self):
        super().__init__(RuleDefinition(
            id=RuleId.AUTO_LAYOUT_REQUIRED,
            name="Auto Layout Required",
            category=RuleCategory.LAYOUT,
            severity=Severity.CRITICAL,
            description="Frames must have auto layout enabled",
            impact_template="Without auto layout the frame cannot be converted to responsive HTML/CSS",
            score_impact=10,
        ))

    def check(self, node: DesignNode, context: CheckContext) -> RuleCheckResult:
        if not is_frame(node):
            return self.passed()

        if not has_auto_layout(node):
            return self.failed(self.create_violation(
                node,
                f'Frame "{node.name}" has no auto layout',
                "The frame cannot be mapped to a flexbox/grid layout; code generation is blocked",
                "Add auto layout to the frame (Shift + A)",
                "NONE",
                "HORIZONTAL or VERTICAL",
            ))

        return self.passed()


class AbsolutePositioningRule(RuleChecker):
    """
    Rule: No absolute positioning.
    A frame without auto layout, or with SCALE constraints, is positioned absolutely.
    """

    def __init__(self):
        super().__init__(RuleDefinition(
            id=RuleId.ABSOLUTE_POSITIONING,
            name="No Absolute Positioning",
            category=RuleCategory.LAYOUT,
            severity=Severity.CRITICAL,
            description="Absolute positioning must not be used",
            impact_template="Absolutely positioned content cannot adapt to the screen size",
            score_impact=10,
        ))

    def check(self, node: DesignNode, context: CheckContext) -> RuleCheckResult:
        if not is_frame(node):
            return self.passed()

        if has_absolute_positioning(node):
            return self.failed(self.create_violation(
                node,
                f'Frame "{node.name}" uses absolute positioning',
                "Responsive behaviour is hard to achieve and the layout is likely to break on mobile",
                "Use auto layout to position children relative to each other",
                "Absolute",
                "Auto layout (relative)",
            ))

        return self.passed()


class FixedSizeDetectedRule(RuleChecker):
    """
    Rule: Avoid fixed widths and heights.
    """

    def __init__(self):
        super().__init__(RuleDefinition(
            id=RuleId.FIXED_SIZE_DETECTED,
            name="Fixed Size Detected",
            category=RuleCategory.SIZE,
            severity=Severity.MAJOR,
            description="Avoid fixed width/height sizing",
            impact_template="Fixed sizes prevent the layout from adapting to the screen size",
            score_impact=5,
        ))

    def check(self, node: DesignNode, context: CheckContext) -> RuleCheckResult:
        if not is_frame(node):
            return self.passed()

        if has_fixed_size(node):
            box = node.absolute_bounding_box
            if box is not None:
                detected = f"{round_half_up(box.width)}px × {round_half_up(box.height)}px"
            else:
                detected = "Fixed"

            return self.failed(self.create_violation(
                node,
                f'Frame "{node.name}" uses a fixed size',
                "Responsiveness is limited; the frame may not display correctly on other screen sizes",
                "Switch the sizing to Hug contents or Fill container",
                detected,
                "Hug or Fill",
            ))

        return self.passed()


class WrapOffRule(RuleChecker):
    """
    Rule: Auto layout frames with several children should wrap.
    """

    def __init__(self):
        super().__init__(RuleDefinition(
            id=RuleId.WRAP_OFF,
            name="Wrap Recommended",
            category=RuleCategory.RESPONSIVE,
            severity=Severity.MAJOR,
            description="Enable wrap on auto layout frames that hold multiple children",
            impact_template="Without wrap, mobile layouts scroll horizontally",
            score_impact=5,
        ))

    def check(self, node: DesignNode, context: CheckContext) -> RuleCheckResult:
        if not is_frame(node) or not has_auto_layout(node):
            return self.passed()

        if node.child_count < WRAP_MIN_CHILDREN:
            return self.passed()

        if not has_wrap_enabled(node):
            return self.failed(self.create_violation(
                node,
                f'Frame "{node.name}" has wrap disabled ({node.child_count} children)',
                "Children will not reflow on small screens and may cause horizontal scrolling",
                'Enable "Wrap" in the auto layout settings',
                "Wrap: OFF",
                "Wrap: ON",
            ))

        return self.passed()


class NonSemanticNameRule(RuleChecker):
    """
    Rule: Frames need meaningful names.
    Names end up as class names and ids in generated code.
    """

    def __init__(self):
        super().__init__(RuleDefinition(
            id=RuleId.NON_SEMANTIC_NAME,
            name="Semantic Naming",
            category=RuleCategory.SEMANTIC,
            severity=Severity.MINOR,
            description="Give frames meaningful names",
            impact_template="Names drive readability of the generated code and its accessibility",
            score_impact=2,
        ))

    def check(self, node: DesignNode, context: CheckContext) -> RuleCheckResult:
        if not is_frame(node):
            return self.passed()

        if not is_semantic_name(node.name):
            return self.failed(self.create_violation(
                node,
                f'Frame "{node.name}" has a non-semantic name',
                "Generated class names, ids and accessibility labels will be meaningless",
                "Rename it to something like header, section-hero or card-product",
                node.name,
                "section-* / header / nav / card-*",
            ))

        return self.passed()

