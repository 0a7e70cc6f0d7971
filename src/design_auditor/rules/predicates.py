# src/design_auditor/rules/predicates.py
"""
Pure predicates shared by the rule catalogue. Each one reads a node
(or a name) and a fixed pattern table, nothing else.
"""
import re
from typing import Pattern, Tuple

from ..tree.core import AxisSizingMode, DesignNode, LayoutMode, LayoutWrap, NodeType

LAYER_ABUSE_THRESHOLD = 50

# --- Pattern tables ---

SEMANTIC_PATTERNS: Tuple[Pattern, ...] = (
    re.compile(r"^(header|footer|nav|section|article|aside|main)", re.IGNORECASE),
    re.compile(r"^(hero|banner|card|modal|dialog|overlay)", re.IGNORECASE),
    re.compile(r"^(button|input|form|select|checkbox|radio)", re.IGNORECASE),
    re.compile(r"^(list|item|grid|row|column|cell)", re.IGNORECASE),
    re.compile(r"^[a-z][a-zA-Z0-9]*(-[a-z][a-zA-Z0-9]*)*$"),  # kebab-case
)

NON_SEMANTIC_PATTERNS: Tuple[Pattern, ...] = (
    re.compile(r"^Frame\s+\d+$", re.IGNORECASE),
    re.compile(r"^Group\s+\d+$", re.IGNORECASE),
    re.compile(r"^Rectangle\s+\d+$", re.IGNORECASE),
    re.compile(r"^Component\s+\d+$", re.IGNORECASE),
    re.compile(r"^(未|無|名|title)$", re.IGNORECASE),  # tool default names
)

# Coarse default-name check used for the summary statistics only
DEFAULT_NAME_PATTERN = re.compile(r"^(Frame|Group|Rectangle|Component)\s+\d+$", re.IGNORECASE)

REUSABLE_PATTERNS: Tuple[Pattern, ...] = tuple(
    re.compile(p, re.IGNORECASE) for p in ("button", "btn", "card", "item", "tag", "badge", "chip")
)

INTERACTIVE_PATTERN = re.compile(r"button|btn|card|input|select", re.IGNORECASE)


# --- Node kind ---

def is_frame(node: DesignNode) -> bool:
    return node.type == NodeType.FRAME


def is_component(node: DesignNode) -> bool:
    return node.type in (NodeType.COMPONENT, NodeType.INSTANCE)


# --- Layout ---

def has_auto_layout(node: DesignNode) -> bool:
    return node.layout_mode is not None and node.layout_mode != LayoutMode.NONE


def has_absolute_positioning(node: DesignNode) -> bool:
    """No auto layout, or scale-based constraints on either axis."""
    if not has_auto_layout(node):
        return True
    return node.constraints is not None and node.constraints.uses_scale


def has_fixed_size(node: DesignNode) -> bool:
    if has_auto_layout(node):
        if (node.primary_axis_sizing_mode == AxisSizingMode.FIXED
                or node.counter_axis_sizing_mode == AxisSizingMode.FIXED):
            return True

    # A bounding box without auto layout means the size is hard-coded
    return node.absolute_bounding_box is not None and not has_auto_layout(node)


def has_wrap_enabled(node: DesignNode) -> bool:
    return node.layout_wrap == LayoutWrap.WRAP


def is_hug(node: DesignNode) -> bool:
    return node.primary_axis_sizing_mode == AxisSizingMode.AUTO


def has_min_width(node: DesignNode) -> bool:
    """
    Auto layout plus either an explicit positive min width, or a counter
    axis that hugs its content (which keeps the content's minimum width).
    """
    if not has_auto_layout(node):
        return False
    if node.min_width is not None and node.min_width > 0:
        return True
    return node.counter_axis_sizing_mode == AxisSizingMode.AUTO


def has_layer_abuse(node: DesignNode) -> bool:
    return node.child_count > LAYER_ABUSE_THRESHOLD


# --- Naming ---

def is_semantic_name(name: str) -> bool:
    """
    A name is semantic when it matches a role prefix or kebab-case, and is
    not one of the tool's default names. Default names always lose.
    """
    if any(p.search(name) for p in NON_SEMANTIC_PATTERNS):
        return False
    return any(p.search(name) for p in SEMANTIC_PATTERNS)


def is_default_name(name: str) -> bool:
    return bool(DEFAULT_NAME_PATTERN.match(name))


def needs_min_width(name: str) -> bool:
    return bool(INTERACTIVE_PATTERN.search(name))


def should_be_component(node: DesignNode) -> bool:
    """Plain nodes whose name suggests a reusable pattern (buttons, cards, tags...)."""
    if is_component(node):
        return False
    return any(p.search(node.name) for p in REUSABLE_PATTERNS)
