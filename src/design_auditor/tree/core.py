from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class NodeType(str, Enum):
    """Closed set of node kinds the auditor understands."""
    DOCUMENT = "DOCUMENT"
    CANVAS = "CANVAS"
    FRAME = "FRAME"
    GROUP = "GROUP"
    VECTOR = "VECTOR"
    RECTANGLE = "RECTANGLE"
    TEXT = "TEXT"
    COMPONENT = "COMPONENT"
    INSTANCE = "INSTANCE"


class LayoutMode(str, Enum):
    NONE = "NONE"
    HORIZONTAL = "HORIZONTAL"
    VERTICAL = "VERTICAL"


class LayoutWrap(str, Enum):
    NO_WRAP = "NO_WRAP"
    WRAP = "WRAP"


class AxisSizingMode(str, Enum):
    FIXED = "FIXED"
    AUTO = "AUTO"  # "hug contents"


class ConstraintType(str, Enum):
    MIN = "MIN"
    MAX = "MAX"
    CENTER = "CENTER"
    STRETCH = "STRETCH"
    SCALE = "SCALE"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    TOP = "TOP"
    BOTTOM = "BOTTOM"
    LEFT_RIGHT = "LEFT_RIGHT"
    TOP_BOTTOM = "TOP_BOTTOM"


class _NodeModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class BoundingBox(_NodeModel):
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0


class LayoutConstraints(_NodeModel):
    horizontal: ConstraintType = ConstraintType.MIN
    vertical: ConstraintType = ConstraintType.MIN

    @property
    def uses_scale(self) -> bool:
        return ConstraintType.SCALE in (self.horizontal, self.vertical)


class DesignNode(_NodeModel):
    """
    Read-only node of an exported design tree.

    The parent owns its children; no reverse pointer is stored. Parent and
    depth relations are derived by the context builder when needed.
    """
    id: str = Field(min_length=1)
    name: str = ""
    type: NodeType
    children: Tuple["DesignNode", ...] = ()

    # --- Auto layout ---
    layout_mode: Optional[LayoutMode] = None
    layout_wrap: Optional[LayoutWrap] = None
    primary_axis_sizing_mode: Optional[AxisSizingMode] = None
    counter_axis_sizing_mode: Optional[AxisSizingMode] = None

    # --- Spacing ---
    item_spacing: Optional[float] = None
    padding_left: Optional[float] = None
    padding_right: Optional[float] = None
    padding_top: Optional[float] = None
    padding_bottom: Optional[float] = None
    min_width: Optional[float] = None
    max_width: Optional[float] = None

    # --- Geometry ---
    absolute_bounding_box: Optional[BoundingBox] = None
    constraints: Optional[LayoutConstraints] = None

    visible: bool = True
    locked: bool = False

    @property
    def child_count(self) -> int:
        return len(self.children)

    @property
    def is_leaf(self) -> bool:
        """Returns True if the node has no children."""
        return not self.children


DesignNode.model_rebuild()
