# treegrid/tree_index.py
from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional, Sequence, Tuple
from .models import Node
from .display_utils import formatted_print

ROOT_KEY = "root"

class TreeIndex:
    """Immutable arena of nodes plus a group key -> ordered child ids mapping.

    The group key of a node's children is the node's id; top-level nodes sit under ROOT_KEY.
    Child order is insertion order and is the stable row order for paging.
    """

    def __init__(self, nodes: Mapping[str, Node], children: Mapping[str, Sequence[str]]):
        self._nodes: Mapping[str, Node] = MappingProxyType(dict(nodes))
        self._children: Mapping[str, Tuple[str, ...]] = MappingProxyType(
            {key: tuple(ids) for key, ids in children.items()}
        )
        if ROOT_KEY not in self._children:
            raise ValueError(f"Index has no '{ROOT_KEY}' entry.")

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes.values())

    @property
    def root_ids(self) -> Tuple[str, ...]:
        return self._children[ROOT_KEY]

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def has_group(self, group_key: str) -> bool:
        return group_key in self._children

    def child_ids(self, group_key: str) -> Optional[Tuple[str, ...]]:
        """Ordered child ids for a group key, or None if the key has no entry."""
        return self._children.get(group_key)

    def get_children_nodes(self, group_key: str) -> Optional[List[Node]]:
        """Ordered child Node objects for a group key, or None if the key has no entry."""
        ids = self._children.get(group_key)
        if ids is None:
            return None
        return [self._nodes[child_id] for child_id in ids]

    def group_keys(self) -> Iterator[str]:
        return iter(self._children)

    def get_node_path(self, node_id: str) -> Optional[List[Node]]:
        """Nodes from a root down to (and including) `node_id`; None if the id or its parent chain is broken."""
        chain: List[Node] = []
        current = self._nodes.get(node_id)
        # A chain longer than the node count can only be a cycle
        while current is not None and len(chain) <= len(self._nodes):
            chain.append(current)
            if current.parent_id is None:
                chain.reverse()
                return chain
            current = self._nodes.get(current.parent_id)
        if chain:
            formatted_print(f"Broken parent chain above node {node_id}", level="WARNING")
        return None

    def _render_node(self, node_id: str, lines: List[str], indent: str, is_last: bool, levels_left: Optional[int]):
        node = self.get_node(node_id)
        if not node: return
        connector = "└── " if is_last else "├── "
        lines.append(f"{indent}{connector}{_node_label(node)}")
        if levels_left is not None and levels_left <= 1:
            return
        new_indent = indent + ("    " if is_last else "│   ")
        child_ids = self._children.get(node_id, ())
        for i, child_id in enumerate(child_ids):
            self._render_node(child_id, lines, new_indent, i == len(child_ids) - 1,
                              None if levels_left is None else levels_left - 1)

    def render_subtree(self, start_node_id: str, levels: Optional[int] = None) -> Optional[str]:
        """Text tree (├──/└──) of a subtree, optionally cut `levels` below the start node."""
        node = self.get_node(start_node_id)
        if not node:
            return None
        lines = [_node_label(node)]
        if levels is None or levels > 0:
            child_ids = self._children.get(start_node_id, ())
            for i, child_id in enumerate(child_ids):
                self._render_node(child_id, lines, "", i == len(child_ids) - 1, levels)
        return "\n".join(lines)

    def render(self, levels: Optional[int] = None) -> str:
        """Text tree of every top-level node."""
        parts = []
        for root_id in self.root_ids:
            rendered = self.render_subtree(root_id, levels)
            if rendered is not None:
                parts.append(rendered)
        return ("\n" + "-" * 20 + "\n").join(parts)


def _node_label(node: Node) -> str:
    name = node.attributes.get("subPartCode", node.id)
    kind = "leaf" if node.is_leaf else "group"
    return f"{name} (ID: {node.id}, {kind})"

