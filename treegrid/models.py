# treegrid/models.py
from types import MappingProxyType
from typing import Any, Dict, List, Optional

class Node:
    """A single row of the tree. Business fields live in `attributes` and are opaque to paging.

    Nodes are read-only once built: the index hands the same instances to every caller.
    """
    __slots__ = ("id", "parent_id", "is_leaf", "depth", "attributes")

    def __init__(self, node_id: str, parent_id: Optional[str] = None, is_leaf: bool = False,
                 depth: int = 0, attributes: Optional[Dict[str, Any]] = None):
        object.__setattr__(self, "id", node_id)
        object.__setattr__(self, "parent_id", parent_id)
        object.__setattr__(self, "is_leaf", is_leaf)
        object.__setattr__(self, "depth", depth)
        object.__setattr__(self, "attributes", MappingProxyType(dict(attributes) if attributes else {}))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"Node is read-only; cannot set '{name}'")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"Node is read-only; cannot delete '{name}'")

    def to_dict(self) -> Dict[str, Any]:
        """Serializes the node to its wire form (business attributes flattened in)."""
        data = dict(self.attributes)
        data.update({
            "id": self.id,
            "parentId": self.parent_id,
            "isLeaf": self.is_leaf,
            "depth": self.depth,
        })
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Node':
        """Deserializes a node; any key that is not a tree field becomes an attribute."""
        attributes = {k: v for k, v in data.items() if k not in ("id", "parentId", "isLeaf", "depth")}
        return cls(
            node_id=str(data["id"]),
            parent_id=data.get("parentId"),
            is_leaf=bool(data.get("isLeaf", False)),
            depth=int(data.get("depth", 0)),
            attributes=attributes,
        )

    def __repr__(self) -> str:
        return f"Node(id={self.id}, parent={self.parent_id}, depth={self.depth}, leaf={self.is_leaf})"


class WindowRequest:
    """A request for rows [start_row, end_row) of the children of the last id in group_path."""

    def __init__(self, group_path: Optional[List[str]] = None, start_row: int = 0, end_row: int = 0):
        self.group_path: List[str] = list(group_path) if group_path else []
        self.start_row = start_row
        self.end_row = end_row

    def to_dict(self) -> Dict[str, Any]:
        return {"groupPath": list(self.group_path), "startRow": self.start_row, "endRow": self.end_row}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WindowRequest':
        # Grid clients send the path as `groupKeys`
        group_path = data.get("groupPath")
        if group_path is None:
            group_path = data.get("groupKeys") or []
        if not isinstance(group_path, list):
            raise ValueError("'groupPath' must be a list of node ids")
        if "startRow" not in data or "endRow" not in data:
            raise KeyError("startRow" if "startRow" not in data else "endRow")
        return cls(
            group_path=[str(key) for key in group_path],
            start_row=data["startRow"],
            end_row=data["endRow"],
        )

    def __repr__(self) -> str:
        return f"WindowRequest(path={self.group_path}, rows=[{self.start_row}, {self.end_row}))"


class WindowResponse:
    """A slice of a node's children plus, optionally, a folded window of the first row's children."""

    def __init__(self, rows: List[Node], row_count: int,
                 folded_child: Optional['WindowResponse'] = None,
                 folded_child_key: Optional[str] = None):
        self.rows: List[Node] = rows
        self.row_count: int = row_count
        self.folded_child: Optional[WindowResponse] = folded_child
        self.folded_child_key: Optional[str] = folded_child_key

    def detach_fold(self):
        """Clears the fold link and returns (folded_child, folded_child_key) as they were."""
        folded, key = self.folded_child, self.folded_child_key
        self.folded_child = None
        self.folded_child_key = None
        return folded, key

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "rows": [node.to_dict() for node in self.rows],
            "rowCount": self.row_count,
        }
        if self.folded_child is not None:
            data["foldedChild"] = self.folded_child.to_dict()
            data["foldedChildKey"] = self.folded_child_key
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WindowResponse':
        folded_data = data.get("foldedChild")
        return cls(
            rows=[Node.from_dict(item) for item in data.get("rows", [])],
            row_count=int(data.get("rowCount", 0)),
            folded_child=cls.from_dict(folded_data) if folded_data else None,
            folded_child_key=data.get("foldedChildKey") if folded_data else None,
        )

    def __repr__(self) -> str:
        fold = f", fold={self.folded_child_key}" if self.folded_child is not None else ""
        return f"WindowResponse(rows={len(self.rows)}, count={self.row_count}{fold})"
