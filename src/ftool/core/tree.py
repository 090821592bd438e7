"""Collapsible value tree for JSON and GeoJSON documents.

The tree is built once from a parsed value. Only the per-node ``collapsed``
flags change afterwards, and the visible lines are recomputed from the tree
on every ``flatten()`` call. Every traversal uses an explicit stack, so
nesting depth is bounded by memory rather than the interpreter's recursion
limit.
"""

import itertools
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple


class NodeKind(Enum):
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    NULL = "null"


CONTAINER_KINDS = (NodeKind.OBJECT, NodeKind.ARRAY)


@dataclass(eq=False)
class TreeNode:
    id: int
    key: Optional[str]
    kind: NodeKind
    value: Any = None
    children: List["TreeNode"] = field(default_factory=list)
    collapsed: bool = False

    @property
    def is_container(self) -> bool:
        return self.kind in CONTAINER_KINDS

    def child(self, key: str) -> Optional["TreeNode"]:
        for node in self.children:
            if node.key == key:
                return node
        return None

    def descendant_count(self) -> int:
        return sum(1 for _ in iter_nodes(self)) - 1

    def to_value(self) -> Any:
        """Rebuild the plain Python value below this node."""
        if not self.is_container:
            return self.value
        result = _empty_container(self)
        stack = [(self, result)]
        while stack:
            node, container = stack.pop()
            for c in node.children:
                if c.is_container:
                    value = _empty_container(c)
                    stack.append((c, value))
                else:
                    value = c.value
                if isinstance(container, dict):
                    container[c.key] = value
                else:
                    container.append(value)
        return result

    def same_as(self, other: "TreeNode") -> bool:
        """Structural equality, including collapse flags."""
        pairs = [(self, other)]
        while pairs:
            a, b = pairs.pop()
            if (a.id, a.key, a.kind, a.value, a.collapsed) != (
                b.id, b.key, b.kind, b.value, b.collapsed
            ) or len(a.children) != len(b.children):
                return False
            pairs.extend(zip(a.children, b.children))
        return True


def _empty_container(node: TreeNode) -> Any:
    return {} if node.kind is NodeKind.OBJECT else []


def iter_nodes(root: TreeNode) -> Iterator[TreeNode]:
    """Every node below and including ``root`` in pre-order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def _scalar_kind(value: Any) -> NodeKind:
    if value is None:
        return NodeKind.NULL
    if isinstance(value, bool):
        return NodeKind.BOOL
    if isinstance(value, (int, float)):
        return NodeKind.NUMBER
    return NodeKind.STRING


def build(value: Any) -> TreeNode:
    """Build a fully expanded tree with pre-order ids starting at 0."""
    counter = itertools.count()
    roots: List[TreeNode] = []
    stack: List[Tuple[Any, Optional[str], List[TreeNode]]] = [(value, None, roots)]
    while stack:
        v, key, siblings = stack.pop()
        node_id = next(counter)
        if isinstance(v, dict):
            node = TreeNode(node_id, key, NodeKind.OBJECT)
            items = [(str(k), child) for k, child in v.items()]
        elif isinstance(v, list):
            node = TreeNode(node_id, key, NodeKind.ARRAY)
            items = [(str(i), child) for i, child in enumerate(v)]
        else:
            node = TreeNode(node_id, key, _scalar_kind(v), value=v)
            items = []
        siblings.append(node)
        for child_key, child in reversed(items):
            stack.append((child, child_key, node.children))
    return roots[0]


def pretty_lines(root: TreeNode, indent: int = 2) -> List[str]:
    """The document as indented JSON text, one entry per line."""
    lines: List[str] = []
    # Entries are either a pending node or a finished closing line
    stack: List[Any] = [(root, 0, "", "")]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            lines.append(item)
            continue
        node, depth, prefix, suffix = item
        pad = " " * (indent * depth)
        if not (node.is_container and node.children):
            lines.append(f"{pad}{prefix}{_json_scalar(node)}{suffix}")
            continue
        is_object = node.kind is NodeKind.OBJECT
        lines.append(pad + prefix + ("{" if is_object else "["))
        stack.append(pad + ("}" if is_object else "]") + suffix)
        last = len(node.children) - 1
        for i in range(last, -1, -1):
            c = node.children[i]
            key = f"{json.dumps(c.key, ensure_ascii=False)}: " if is_object else ""
            stack.append((c, depth + 1, key, "" if i == last else ","))
    return lines


def _json_scalar(node: TreeNode) -> str:
    if node.kind is NodeKind.OBJECT:
        return "{}"
    if node.kind is NodeKind.ARRAY:
        return "[]"
    return json.dumps(node.value, ensure_ascii=False)


def value_to_display(node: TreeNode) -> str:
    """Short single-line form of a node's value."""
    if node.kind is NodeKind.OBJECT:
        return f"{{{len(node.children)}}}"
    if node.kind is NodeKind.ARRAY:
        return f"[{len(node.children)}]"
    if node.kind is NodeKind.NULL:
        return "null"
    if node.kind is NodeKind.BOOL:
        return str(node.value).lower()
    return str(node.value)


@dataclass(frozen=True)
class Feature:
    index: int
    geometry_type: Optional[str]
    node: TreeNode = field(compare=False, repr=False)


@dataclass(frozen=True)
class GeoSummary:
    feature_count: int
    geometry_types: List[str]
    bbox: Optional[Tuple[float, float, float, float]]


class TreeModel:
    """Tree plus collapse state, indexed by node id."""

    def __init__(self, root: TreeNode):
        self.root = root
        self._nodes: Dict[int, TreeNode] = {}
        for _, node in self._walk(root, 0, honor_collapsed=False):
            self._nodes[node.id] = node

    @classmethod
    def from_value(cls, value: Any) -> "TreeModel":
        return cls(build(value))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TreeModel):
            return NotImplemented
        return self.root.same_as(other.root)

    def node(self, node_id: int) -> TreeNode:
        return self._nodes[node_id]

    def node_count(self) -> int:
        return len(self._nodes)

    def toggle(self, node_id: int) -> None:
        """Flip the collapse flag of a container; scalars are left alone.

        Raises:
            KeyError: If ``node_id`` does not exist
        """
        node = self._nodes[node_id]
        if node.is_container:
            node.collapsed = not node.collapsed

    def expand_all(self) -> None:
        for node in self._nodes.values():
            node.collapsed = False

    def collapse_all(self) -> None:
        for node in self._nodes.values():
            if node.is_container and node is not self.root:
                node.collapsed = True

    def flatten(self) -> List[Tuple[int, TreeNode]]:
        """Visible lines as (depth, node) in pre-order."""
        return list(self._walk(self.root, 0, honor_collapsed=True))

    @staticmethod
    def _walk(
        root: TreeNode, depth: int, honor_collapsed: bool
    ) -> Iterator[Tuple[int, TreeNode]]:
        stack = [(depth, root)]
        while stack:
            d, node = stack.pop()
            yield d, node
            if honor_collapsed and node.collapsed:
                continue
            for child in reversed(node.children):
                stack.append((d + 1, child))

    # GeoJSON views

    def root_type(self) -> Optional[str]:
        if self.root.kind is not NodeKind.OBJECT:
            return None
        type_node = self.root.child("type")
        if type_node is None or type_node.kind is not NodeKind.STRING:
            return None
        return type_node.value

    def is_feature_collection(self) -> bool:
        return self.root_type() == "FeatureCollection"

    def features(self) -> List[Feature]:
        """Features of a FeatureCollection (or the root itself for a Feature)."""
        if self.root_type() == "Feature":
            nodes = [self.root]
        elif self.is_feature_collection():
            array = self.root.child("features")
            if array is None or array.kind is not NodeKind.ARRAY:
                return []
            nodes = array.children
        else:
            return []

        result = []
        for i, node in enumerate(nodes):
            geometry_type = None
            geometry = node.child("geometry")
            if geometry is not None:
                type_node = geometry.child("type")
                if type_node is not None and type_node.kind is NodeKind.STRING:
                    geometry_type = type_node.value
            result.append(Feature(i, geometry_type, node))
        return result

    def properties_table(self, feature_index: int) -> List[Tuple[str, str]]:
        """Property (key, value) pairs of one feature in document order.

        Raises:
            IndexError: If there is no such feature
        """
        if feature_index < 0:
            raise IndexError(f"Feature index out of range: {feature_index}")
        return _properties(self.features()[feature_index].node)

    def feature_rows(self) -> Tuple[List[str], List[List[str]]]:
        """Features as a table: union of property keys in first-seen order."""
        tables = [dict(_properties(f.node)) for f in self.features()]
        headers = list(dict.fromkeys(key for props in tables for key in props))
        rows = [[props.get(key, "null") for key in headers] for props in tables]
        return headers, rows

    def summary(self) -> GeoSummary:
        features = self.features()
        geometry_types = sorted({f.geometry_type for f in features if f.geometry_type})
        bounds: List[float] = []
        for f in features:
            geometry = f.node.child("geometry")
            coordinates = geometry.child("coordinates") if geometry else None
            if coordinates is not None:
                _collect_bounds(coordinates, bounds)
        bbox = tuple(bounds) if bounds else None
        return GeoSummary(len(features), geometry_types, bbox)


def _properties(feature: TreeNode) -> List[Tuple[str, str]]:
    properties = feature.child("properties")
    if properties is None or properties.kind is not NodeKind.OBJECT:
        return []
    return [(c.key or "", value_to_display(c)) for c in properties.children]


def _collect_bounds(node: TreeNode, bounds: List[float]) -> None:
    """Grow ``bounds`` [min_lon, min_lat, max_lon, max_lat] over positions."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.kind is not NodeKind.ARRAY:
            continue
        children = current.children
        if (
            len(children) >= 2
            and children[0].kind is NodeKind.NUMBER
            and children[1].kind is NodeKind.NUMBER
        ):
            lon, lat = float(children[0].value), float(children[1].value)
            if not bounds:
                bounds.extend([lon, lat, lon, lat])
            else:
                bounds[0] = min(bounds[0], lon)
                bounds[1] = min(bounds[1], lat)
                bounds[2] = max(bounds[2], lon)
                bounds[3] = max(bounds[3], lat)
            continue
        stack.extend(children)


__all__ = [
    "Feature",
    "GeoSummary",
    "NodeKind",
    "TreeModel",
    "TreeNode",
    "build",
    "iter_nodes",
    "pretty_lines",
    "value_to_display",
]
