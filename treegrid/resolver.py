# treegrid/resolver.py
from typing import List, Optional, Sequence
from .models import Node, WindowRequest, WindowResponse
from .tree_index import ROOT_KEY, TreeIndex
from .exceptions import InvalidRangeError, UnknownGroupError

def _check_window(start_row, end_row) -> None:
    for value in (start_row, end_row):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidRangeError(start_row, end_row, "bounds must be integers")
    if start_row < 0:
        raise InvalidRangeError(start_row, end_row, "startRow must be >= 0")
    if start_row > end_row:
        raise InvalidRangeError(start_row, end_row, "startRow must not exceed endRow")


class WindowResolver:
    """Answers windowed row requests against a read-only TreeIndex.

    Holds no per-request state, so one instance can serve concurrent requests.
    """

    def __init__(self, index: TreeIndex):
        self.index = index

    @staticmethod
    def group_key(group_path: Sequence[str]) -> str:
        """Last id of the path, or the root sentinel for an empty path."""
        return group_path[-1] if group_path else ROOT_KEY

    def resolve(self, group_path: Sequence[str], start_row: int, end_row: int) -> WindowResponse:
        key = self.group_key(group_path)
        children: Optional[List[Node]] = self.index.get_children_nodes(key)
        if children is None:
            raise UnknownGroupError(key)
        _check_window(start_row, end_row)

        rows = children[start_row:end_row]
        response = WindowResponse(rows=rows, row_count=len(children))

        remaining = (end_row - start_row) - len(rows)
        if remaining > 0 and rows:
            # Same window against the first row's own children, not a continuation.
            anchor_id = rows[0].id
            grandchildren = self.index.get_children_nodes(anchor_id)
            if grandchildren:
                folded_rows = grandchildren[start_row:end_row]
                if folded_rows:
                    response.folded_child = WindowResponse(rows=folded_rows, row_count=len(grandchildren))
                    response.folded_child_key = anchor_id
        return response

    def resolve_request(self, request: WindowRequest) -> WindowResponse:
        return self.resolve(request.group_path, request.start_row, request.end_row)
