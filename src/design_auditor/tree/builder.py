# src/design_auditor/tree/builder.py
import json
import logging
from typing import Any, Dict, List, Mapping, Set, Union

from pydantic import ValidationError

from ..errors import TreeBuildError
from .core import DesignNode, NodeType
from .models import DesignDocument

logger = logging.getLogger(__name__)

# Node types the design tool exports but the auditor does not model.
# They are kept as generic containers so their subtrees stay visible.
_FALLBACK_TYPE = NodeType.GROUP
_KNOWN_TYPES = {t.value for t in NodeType}


class TreeBuilder:
    """
    Builder responsible for turning a raw design file payload (as returned by
    the design tool's file API) into a structured DesignDocument model.
    """

    def parse_doc(self, payload: Union[str, bytes, Mapping[str, Any]]) -> DesignDocument:
        """
        Parses a raw file payload into a DesignDocument.

        Args:
            payload: The decoded JSON mapping, or the raw JSON text.

        Returns:
            DesignDocument: The file metadata and its node tree.

        Raises:
            TreeBuildError: If the payload is not valid JSON, has no
                            'document' node, or contains invalid node data.
        """
        data = self._decode(payload)

        root = data.get("document")
        if not isinstance(root, Mapping):
            raise TreeBuildError("Payload has no 'document' node")

        document_node = self.parse_node(root)

        try:
            return DesignDocument(
                name=str(data.get("name", "")),
                version=data.get("version"),
                last_modified=data.get("lastModified"),
                schema_version=data.get("schemaVersion", 0),
                document=document_node,
                components=data.get("components") or {},
                component_sets=data.get("componentSets") or {},
            )
        except ValidationError as e:
            raise TreeBuildError(f"Invalid file metadata: {e}") from e

    def parse_node(self, raw: Mapping[str, Any]) -> DesignNode:
        """
        Parses a single raw node (and its subtree) into a DesignNode.

        Unknown node types fall back to a generic GROUP so that their
        children are still part of the tree.
        """
        prepared = self._prepare(raw, path="document")
        try:
            return DesignNode.model_validate(prepared)
        except ValidationError as e:
            raise TreeBuildError(f"Invalid node data: {e}") from e

    @staticmethod
    def _decode(payload: Union[str, bytes, Mapping[str, Any]]) -> Mapping[str, Any]:
        if isinstance(payload, (str, bytes)):
            try:
                payload = json.loads(payload)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise TreeBuildError(f"Payload is not valid JSON: {e}") from e

        if not isinstance(payload, Mapping):
            raise TreeBuildError(f"Payload must be a JSON object, got {type(payload).__name__}")
        return payload

    def _prepare(self, raw: Any, path: str) -> Dict[str, Any]:
        """
        Normalises a raw node dict before validation. Walks the tree with an
        explicit stack; a mapping reachable twice is rejected as a cycle.
        """
        if not isinstance(raw, Mapping):
            raise TreeBuildError(f"Node at {path} is not an object")

        root_out: Dict[str, Any] = {}
        stack: List[tuple] = [(raw, root_out, path)]
        seen: Set[int] = set()

        while stack:
            src, out, node_path = stack.pop()
            if id(src) in seen:
                raise TreeBuildError(f"Node at {node_path} is reachable twice (cyclic payload)")
            seen.add(id(src))

            if not src.get("id"):
                raise TreeBuildError(f"Node at {node_path} has no id")

            out.update({k: v for k, v in src.items() if k != "children"})

            node_type = str(src.get("type", "")).upper()
            if node_type not in _KNOWN_TYPES:
                logger.debug(
                    "Unknown node type '%s' at %s (id=%s). Treating as %s.",
                    node_type, node_path, src.get("id"), _FALLBACK_TYPE.value
                )
                node_type = _FALLBACK_TYPE.value
            out["type"] = node_type

            raw_children = src.get("children") or []
            if not isinstance(raw_children, list):
                raise TreeBuildError(f"Children of node {src.get('id')} must be a list")

            children_out: List[Dict[str, Any]] = []
            for index, child in enumerate(raw_children):
                child_path = f"{node_path}/{index}"
                if not isinstance(child, Mapping):
                    raise TreeBuildError(f"Node at {child_path} is not an object")
                child_out: Dict[str, Any] = {}
                children_out.append(child_out)
                stack.append((child, child_out, child_path))
            out["children"] = children_out

        return root_out
