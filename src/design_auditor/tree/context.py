# src/design_auditor/tree/context.py
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .core import DesignNode

logger = logging.getLogger(__name__)

# Safety valve for depth computation. Depth may under-count beyond this.
MAX_DEPTH_STEPS = 100


@dataclass(frozen=True)
class CheckContext:
    """
    Per-node evaluation context, built fresh for every node visited.

    Attributes:
        depth: Number of ancestors between the node and the root (0 for the root).
        parent_node: The resolved parent, or None for the root / unattached nodes.
        root_node: The root of the analysed tree.
        all_nodes: The flattened tree, shared by every context of one analysis.
    """
    depth: int
    parent_node: Optional[DesignNode]
    root_node: DesignNode
    all_nodes: Tuple[DesignNode, ...]


def flatten(root: DesignNode) -> List[DesignNode]:
    """
    Depth-first pre-order traversal, root first, children in order.

    Every distinct node id is emitted once. A node whose id was already
    emitted (a cycle or a shared subtree in malformed input) is skipped
    together with its children, and a warning is logged.
    """
    nodes: List[DesignNode] = []
    seen: Set[str] = set()
    stack: List[DesignNode] = [root]

    while stack:
        node = stack.pop()
        if node.id in seen:
            logger.warning("Node id '%s' encountered twice while flattening. Skipping repeated subtree.", node.id)
            continue
        seen.add(node.id)
        nodes.append(node)
        # Reversed so the first child is popped first
        stack.extend(reversed(node.children))

    return nodes


def resolve_parent(node: DesignNode, all_nodes: Iterable[DesignNode]) -> Optional[DesignNode]:
    """
    Linear scan for the first node whose direct children contain `node` (by id).
    O(N) per call. Prefer TreeIndex.resolve_parent during a full analysis.
    """
    for candidate in all_nodes:
        if any(child.id == node.id for child in candidate.children):
            return candidate
    return None


def compute_depth(node: DesignNode, root: DesignNode, all_nodes: Sequence[DesignNode]) -> int:
    """
    Walks parents up to the root using linear scans. O(depth x N).
    Capped at MAX_DEPTH_STEPS steps.
    """
    return _walk_depth(node, root, lambda current: resolve_parent(current, all_nodes))


def _walk_depth(node: DesignNode, root: DesignNode, parent_of) -> int:
    depth = 0
    current: Optional[DesignNode] = node

    while current is not None and current.id != root.id:
        if depth >= MAX_DEPTH_STEPS:
            logger.warning("Depth computation reached %d steps for node %s. Using capped depth.",
                           MAX_DEPTH_STEPS, node.id)
            break
        depth += 1
        current = parent_of(current)

    return depth


class TreeIndex:
    """
    One-time index over a tree: the flattened node list plus a
    child id -> parent map. Built once per analysis, before any rule runs.
    """

    def __init__(self, root: DesignNode):
        self.root = root
        self.all_nodes: Tuple[DesignNode, ...] = tuple(flatten(root))

        self._parents: Dict[str, DesignNode] = {}
        for candidate in self.all_nodes:
            for child in candidate.children:
                # First parent wins, same as the linear scan
                self._parents.setdefault(child.id, candidate)

    def __len__(self) -> int:
        return len(self.all_nodes)

    def resolve_parent(self, node: DesignNode) -> Optional[DesignNode]:
        return self._parents.get(node.id)

    def compute_depth(self, node: DesignNode) -> int:
        """Depth of `node` below the root in O(depth) lookups, capped at MAX_DEPTH_STEPS."""
        return _walk_depth(node, self.root, self.resolve_parent)

    def build_context(self, node: DesignNode) -> CheckContext:
        return CheckContext(
            depth=self.compute_depth(node),
            parent_node=self.resolve_parent(node),
            root_node=self.root,
            all_nodes=self.all_nodes,
        )
