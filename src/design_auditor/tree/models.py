# src/design_auditor/tree/models.py
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from .core import DesignNode


class DesignDocument(BaseModel):
    """
    Represents an exported design file.

    Root container for the node tree and the file-level metadata the
    design tool ships alongside it.
    """
    name: str = ""
    version: Optional[str] = None
    last_modified: Optional[str] = None
    schema_version: int = 0

    # The node tree
    document: DesignNode

    # --- Library data (passed through, not audited) ---
    components: Dict[str, Any] = Field(default_factory=dict)
    component_sets: Dict[str, Any] = Field(default_factory=dict)
