# treegrid/datasource.py
"""Client side of the paging protocol.

`ServerSideDatasource.fetch` asks a transport for one window, hands the primary slice to
the row model, then pushes every folded child window into the model at its own route.
"""
from typing import Dict, List, Optional, Protocol, Sequence, Tuple
from .models import WindowRequest, WindowResponse
from .config import GridOptions
from .display_utils import formatted_print

DEFAULT_MAX_FOLD_DEPTH = 32

class Transport(Protocol):
    def get_rows(self, request: WindowRequest) -> WindowResponse: ...


class RowModel(Protocol):
    """The grid's row model. Block size, caching, concurrency and debounce are its business."""

    def success(self, request: WindowRequest, response: WindowResponse) -> None: ...

    def fail(self, request: WindowRequest, error: Exception) -> None: ...

    def apply_row_data(self, route: List[str], response: WindowResponse) -> None: ...


def deep_apply(row_model: RowModel, group_path: Sequence[str], folded: Optional[WindowResponse],
               folded_key: Optional[str], max_depth: int = DEFAULT_MAX_FOLD_DEPTH) -> int:
    """Applies a chain of folded windows, one flat level at a time. Returns levels applied.

    Each level's fold link is cut before the model sees it.
    """
    pending: List[Tuple[List[str], WindowResponse]] = []
    if folded is not None and folded_key is not None:
        pending.append((list(group_path) + [folded_key], folded))

    applied = 0
    while pending:
        route, level = pending.pop()
        if applied >= max_depth:
            formatted_print(f"Fold chain deeper than {max_depth} levels at {route}; dropping the rest.", level="WARNING")
            break
        next_level, next_key = level.detach_fold()
        row_model.apply_row_data(route, level)
        applied += 1
        if next_level is not None and next_key is not None:
            pending.append((route + [next_key], next_level))
    return applied


class ServerSideDatasource:
    def __init__(self, transport: Transport, options: Optional[GridOptions] = None,
                 max_fold_depth: int = DEFAULT_MAX_FOLD_DEPTH):
        self.transport = transport
        self.options = options if options is not None else GridOptions() # Passed through, never read here
        self.max_fold_depth = max_fold_depth

    def fetch(self, request: WindowRequest, row_model: RowModel) -> WindowResponse:
        """Fetches one window and applies it, plus any folded levels, into `row_model`.

        Any error, resolver or transport, reaches the model's `fail` and is re-raised;
        nothing is applied for a failed call.
        """
        outgoing = WindowRequest(list(request.group_path), request.start_row, request.end_row)
        try:
            response = self.transport.get_rows(outgoing)
        except Exception as e:
            formatted_print(f"Fetch failed for {request}: {e}", level="DEBUG")
            row_model.fail(request, e)
            raise

        folded, folded_key = response.detach_fold()
        row_model.success(request, response)
        deep_apply(row_model, request.group_path, folded, folded_key, self.max_fold_depth)
        return response


class InMemoryRowModel:
    """Row model that records what it receives, keyed by route."""

    def __init__(self):
        self.blocks: Dict[Tuple[str, ...], List[WindowResponse]] = {}
        self.applied_routes: List[Tuple[str, ...]] = []
        self.failures: List[Tuple[WindowRequest, Exception]] = []

    def success(self, request: WindowRequest, response: WindowResponse) -> None:
        self.blocks.setdefault(tuple(request.group_path), []).append(response)

    def fail(self, request: WindowRequest, error: Exception) -> None:
        self.failures.append((request, error))

    def apply_row_data(self, route: List[str], response: WindowResponse) -> None:
        key = tuple(route)
        self.blocks.setdefault(key, []).append(response)
        self.applied_routes.append(key)

    def rows_at(self, route: Sequence[str]) -> list:
        """All rows received for a route, in arrival order."""
        return [node for block in self.blocks.get(tuple(route), []) for node in block.rows]
