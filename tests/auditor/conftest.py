# tests/auditor/conftest.py
import itertools

import pytest

from design_auditor.rules.catalogue import default_catalogue
from design_auditor.tree.context import TreeIndex
from design_auditor.tree.core import DesignNode, LayoutMode, NodeType


@pytest.fixture
def make_node():
    """
    Factory for DesignNode objects with unique ids.
    Keyword arguments are passed straight to the model (snake_case names).
    """
    counter = itertools.count(1)

    def _make(name="node", type=NodeType.FRAME, children=(), **fields):
        node_id = fields.pop("id", None) or f"1:{next(counter)}"
        return DesignNode(id=node_id, name=name, type=type, children=tuple(children), **fields)

    return _make


@pytest.fixture
def make_frame(make_node):
    """Factory for a conformant auto layout frame (vertical, no sizing flags)."""
    def _make(name="section", children=(), **fields):
        fields.setdefault("layout_mode", LayoutMode.VERTICAL)
        return make_node(name=name, type=NodeType.FRAME, children=children, **fields)

    return _make


@pytest.fixture
def make_text(make_node):
    def _make(name="label"):
        return make_node(name=name, type=NodeType.TEXT)

    return _make


@pytest.fixture
def context_for():
    """Builds the CheckContext of `node` inside the tree rooted at `root`."""
    def _build(node, root=None):
        return TreeIndex(root if root is not None else node).build_context(node)

    return _build


@pytest.fixture
def catalogue():
    return default_catalogue()
