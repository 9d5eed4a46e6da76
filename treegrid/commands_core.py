# treegrid/commands_core.py
from typing import Any, Dict, Optional, Tuple

import httpx

from .generator import GeneratorConfig, generate
from .tree_index import TreeIndex
from .models import WindowRequest, WindowResponse
from .resolver import WindowResolver
from .datasource import RowModel, ServerSideDatasource
from .exceptions import InvalidConfigError, InvalidRangeError, UnknownGroupError

class CommandStatus:
    SUCCESS = "success"
    ERROR = "error"
    NOT_FOUND = "not_found" # Unknown group / node
    INVALID_RANGE = "invalid_range"

# Result tuple structure: (status: CommandStatus, data: Any, message: str)
# 'data' can be TreeIndex, WindowResponse, dict, etc., depending on the command.

def generate_tree_action(config: GeneratorConfig) -> Tuple[str, Optional[TreeIndex], str]:
    """Action to build the tree index."""
    try:
        index = generate(config)
    except InvalidConfigError as e:
        return CommandStatus.ERROR, None, f"Invalid generator configuration: {e}"
    group_count = sum(1 for _ in index.group_keys()) - 1
    return CommandStatus.SUCCESS, index, f"Generated {len(index)} nodes ({group_count} with children)."

def parse_window_request(data: Any) -> Tuple[str, Optional[WindowRequest], str]:
    """Builds a WindowRequest from a wire dict."""
    if not isinstance(data, dict):
        return CommandStatus.INVALID_RANGE, None, "Request body must be a JSON object."
    try:
        request = WindowRequest.from_dict(data)
    except KeyError as e:
        return CommandStatus.INVALID_RANGE, None, f"Missing {e} in request body."
    except ValueError as e:
        return CommandStatus.INVALID_RANGE, None, str(e)
    return CommandStatus.SUCCESS, request, "Request parsed."

def get_rows_action(resolver: WindowResolver, request: WindowRequest) -> Tuple[str, Optional[WindowResponse], str]:
    """Action to resolve one row window."""
    try:
        response = resolver.resolve_request(request)
    except UnknownGroupError as e:
        return CommandStatus.NOT_FOUND, None, str(e)
    except InvalidRangeError as e:
        return CommandStatus.INVALID_RANGE, None, str(e)
    fold_msg = f", folded {len(response.folded_child.rows)} rows under '{response.folded_child_key}'" if response.folded_child else ""
    return CommandStatus.SUCCESS, response, f"Returned {len(response.rows)} of {response.row_count} rows{fold_msg}."

def fetch_rows_action(datasource: ServerSideDatasource, request: WindowRequest, row_model: RowModel) -> Tuple[str, Optional[WindowResponse], str]:
    """Action to run one datasource fetch into a row model."""
    try:
        response = datasource.fetch(request, row_model)
    except UnknownGroupError as e:
        return CommandStatus.NOT_FOUND, None, str(e)
    except InvalidRangeError as e:
        return CommandStatus.INVALID_RANGE, None, str(e)
    except httpx.HTTPError as e:
        return CommandStatus.ERROR, None, f"Transport error while fetching rows: {e}"
    return CommandStatus.SUCCESS, response, f"Fetched {len(response.rows)} of {response.row_count} rows."

def node_info_action(index: TreeIndex, node_id: str) -> Tuple[str, Optional[Dict[str, Any]], str]:
    """Action to describe a node and the group path used to window its children."""
    node = index.get_node(node_id)
    if not node:
        return CommandStatus.NOT_FOUND, None, f"Node with ID '{node_id}' not found."
    path = index.get_node_path(node_id)
    if path is None:
        return CommandStatus.ERROR, None, f"Could not build path for node '{node_id}'."
    child_ids = index.child_ids(node_id)
    info = {
        "node": node.to_dict(),
        "groupPath": [n.id for n in path],
        "ancestors": [n.id for n in path[:-1]],
        "childCount": len(child_ids) if child_ids is not None else 0,
    }
    return CommandStatus.SUCCESS, info, f"Node '{node_id}' at depth {node.depth}."

def export_tree_action(index: TreeIndex, export_filepath: Optional[str], levels: Optional[int] = None) -> Tuple[str, Optional[str], str]:
    """Action to export the tree as text. Returns (status, export_content_or_None, message)."""
    if not index.root_ids:
        return CommandStatus.SUCCESS, None, "Tree has no roots, nothing to export."

    export_content = index.render(levels)

    if export_filepath:
        try:
            with open(export_filepath, 'w', encoding='utf-8') as f:
                f.write(export_content)
            return CommandStatus.SUCCESS, None, f"Tree exported as text to: {export_filepath}"
        except OSError as e:
            return CommandStatus.ERROR, None, f"Error writing export file '{export_filepath}': {e}"
    return CommandStatus.SUCCESS, export_content, "Tree export content generated."

# --- Help ---
# name -> (usage, summary, [(example, explanation), ...])
COMMAND_HELP = {
    "serve": ("serve [--host HOST] [--port PORT]", "Starts the HTTP API serving POST /getRows.", []),
    "rows": ("rows [GROUP_ID ...] [--start N] [--end N] [--url URL]",
             "Fetches one row window and applies folded child windows.", [
                 ("rows", "first rows under the root sentinel"),
                 ("rows 0 5", "children of node 5, reached through node 0"),
                 ("rows --url http://h:p", "ask a running server instead of a local tree"),
             ]),
    "tree": ("tree [NODE_ID] [--levels N]", "Displays the tree, or the subtree of NODE_ID, as text.", []),
    "path": ("path <NODE_ID>", "Shows a node and the group path used to request its children.", []),
    "export": ("export [OUTPUT_FILE] [--levels N]", "Exports the whole tree as a text tree.", []),
    "help": ("help [<command>]", "Displays help.", []),
}

COMMAND_ALIASES = {"ls": "rows", "get": "rows", "show": "tree", "h": "help"}

def _aliases_of(command: str) -> list:
    return sorted(alias for alias, target in COMMAND_ALIASES.items() if target == command)

def command_summary(command: str) -> str:
    return COMMAND_HELP[command][1]

def get_general_help_text() -> str:
    width = max(len(name) for name in COMMAND_HELP) + 2
    lines = ["\ntreegrid - Available Commands", "Type 'help <command>' for more details."]
    for name in sorted(COMMAND_HELP):
        aliases = _aliases_of(name)
        suffix = f" (Aliases: {', '.join(aliases)})" if aliases else ""
        lines.append(f"  {name:<{width}} {command_summary(name)}{suffix}")
    lines.append("\nGlobal options: --seed, --max-depth, --child-probability, --total-nodes.")
    lines.append("Node IDs are decimal strings; the root is '0'. An empty group path means the root sentinel.")
    return "\n".join(lines)

def get_specific_help_text(command_name: str) -> str:
    name = COMMAND_ALIASES.get(command_name.lower(), command_name.lower())
    if name not in COMMAND_HELP:
        return f"Unknown command '{command_name}'. Type 'help' for a list."
    usage, summary, examples = COMMAND_HELP[name]
    lines = [f"Usage: {usage}", summary]
    lines.extend(f"    {example:<24}: {text}" for example, text in examples)
    aliases = _aliases_of(name)
    if aliases:
        lines.append(f"(Aliases: {', '.join(aliases)})")
    return "\n".join(lines)
