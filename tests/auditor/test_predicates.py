# tests/auditor/test_predicates.py
import pytest

from design_auditor.rules import predicates as p
from design_auditor.tree.core import (
    AxisSizingMode,
    BoundingBox,
    ConstraintType,
    LayoutConstraints,
    LayoutMode,
    LayoutWrap,
    NodeType,
)


@pytest.mark.parametrize("name, expected", [
    ("header", True),
    ("Header-main", True),
    ("section-hero", True),
    ("card-product", True),
    ("buttonPrimary", True),
    ("main", True),
    ("Frame 12", False),
    ("frame 3", False),
    ("Group 1", False),
    ("Rectangle 44", False),
    ("Component 2", False),
    ("title", False),
    ("Title", False),
    ("My Frame", False),
    ("", False),
])
def test_is_semantic_name(name, expected):
    assert p.is_semantic_name(name) is expected


def test_default_name_always_loses():
    # Starts like a role name but is a tool default
    assert p.is_semantic_name("Component 7") is False


@pytest.mark.parametrize("name, expected", [
    ("Frame 1", True),
    ("Group 22", True),
    ("header", False),
    ("title", False),
])
def test_is_default_name(name, expected):
    assert p.is_default_name(name) is expected


@pytest.mark.parametrize("name, expected", [
    ("button-primary", True),
    ("IconBtn", True),
    ("card", True),
    ("input-email", True),
    ("select-country", True),
    ("tag-new", False),
    ("header", False),
])
def test_needs_min_width(name, expected):
    assert p.needs_min_width(name) is expected


def test_should_be_component(make_node):
    assert p.should_be_component(make_node(name="Badge new"))
    assert p.should_be_component(make_node(name="list-item"))
    assert not p.should_be_component(make_node(name="header"))
    assert not p.should_be_component(make_node(name="button", type=NodeType.INSTANCE))
    assert not p.should_be_component(make_node(name="card", type=NodeType.COMPONENT))


def test_node_kind(make_node):
    assert p.is_frame(make_node(type=NodeType.FRAME))
    assert not p.is_frame(make_node(type=NodeType.GROUP))
    assert p.is_component(make_node(type=NodeType.COMPONENT))
    assert p.is_component(make_node(type=NodeType.INSTANCE))
    assert not p.is_component(make_node(type=NodeType.FRAME))


def test_has_auto_layout(make_node):
    assert p.has_auto_layout(make_node(layout_mode=LayoutMode.HORIZONTAL))
    assert not p.has_auto_layout(make_node(layout_mode=LayoutMode.NONE))
    assert not p.has_auto_layout(make_node())


def test_has_absolute_positioning(make_node):
    assert p.has_absolute_positioning(make_node())

    relative = make_node(layout_mode=LayoutMode.VERTICAL)
    assert not p.has_absolute_positioning(relative)

    scaled = make_node(
        layout_mode=LayoutMode.VERTICAL,
        constraints=LayoutConstraints(horizontal=ConstraintType.LEFT, vertical=ConstraintType.SCALE),
    )
    assert p.has_absolute_positioning(scaled)


def test_has_fixed_size(make_node):
    box = BoundingBox(width=100, height=40)

    assert p.has_fixed_size(make_node(absolute_bounding_box=box))
    assert not p.has_fixed_size(make_node())
    assert p.has_fixed_size(make_node(layout_mode=LayoutMode.HORIZONTAL,
                                      counter_axis_sizing_mode=AxisSizingMode.FIXED))
    # Auto layout with a bounding box but hugging on both axes
    assert not p.has_fixed_size(make_node(layout_mode=LayoutMode.HORIZONTAL,
                                          primary_axis_sizing_mode=AxisSizingMode.AUTO,
                                          counter_axis_sizing_mode=AxisSizingMode.AUTO,
                                          absolute_bounding_box=box))


def test_wrap_and_hug(make_node):
    assert p.has_wrap_enabled(make_node(layout_wrap=LayoutWrap.WRAP))
    assert not p.has_wrap_enabled(make_node(layout_wrap=LayoutWrap.NO_WRAP))
    assert not p.has_wrap_enabled(make_node())
    assert p.is_hug(make_node(primary_axis_sizing_mode=AxisSizingMode.AUTO))
    assert not p.is_hug(make_node(primary_axis_sizing_mode=AxisSizingMode.FIXED))


def test_has_min_width(make_node):
    assert not p.has_min_width(make_node(min_width=120))  # no auto layout
    assert p.has_min_width(make_node(layout_mode=LayoutMode.HORIZONTAL, min_width=120))
    assert p.has_min_width(make_node(layout_mode=LayoutMode.HORIZONTAL,
                                     counter_axis_sizing_mode=AxisSizingMode.AUTO))
    assert not p.has_min_width(make_node(layout_mode=LayoutMode.HORIZONTAL,
                                         counter_axis_sizing_mode=AxisSizingMode.FIXED))
    assert not p.has_min_width(make_node(layout_mode=LayoutMode.HORIZONTAL, min_width=0))


def test_has_layer_abuse(make_node, make_text):
    at_limit = make_node(children=[make_text() for _ in range(p.LAYER_ABUSE_THRESHOLD)])
    over = make_node(children=[make_text() for _ in range(p.LAYER_ABUSE_THRESHOLD + 1)])

    assert not p.has_layer_abuse(at_limit)
    assert p.has_layer_abuse(over)
