# treegrid/cli.py
import argparse
import sys
import functools
from dataclasses import replace
from typing import Callable, Optional
from .config import Settings, load_settings
from .tree_index import TreeIndex
from .models import WindowRequest
from .resolver import WindowResolver
from .transport import HttpTransport, LocalTransport
from .datasource import InMemoryRowModel, ServerSideDatasource
from .commands_core import (
    generate_tree_action, fetch_rows_action, node_info_action, export_tree_action,
    command_summary, get_general_help_text, get_specific_help_text, CommandStatus
)
from .exceptions import InvalidConfigError
from .display_utils import formatted_print

def _settings_from_args(args: argparse.Namespace) -> Settings:
    """Environment settings, overridden by any generation flags given on the command line."""
    try:
        base = load_settings()
    except InvalidConfigError as e:
        formatted_print(str(e), level="ERROR")
        sys.exit(1)
    overrides = {
        "max_depth": args.max_depth,
        "child_probability": args.child_probability,
        "total_node_count": args.total_nodes,
        "seed": args.seed,
    }
    return replace(base, **{k: v for k, v in overrides.items() if v is not None})

# Decorator for commands that operate on a generated tree
def tree_command(func: Callable[[TreeIndex, argparse.Namespace], None]):
    """
    Decorator that builds the tree index from the global flags / environment
    and calls the decorated handler with it. Generation errors exit with status 1.
    """
    @functools.wraps(func)
    def wrapper(args: argparse.Namespace) -> None:
        settings = _settings_from_args(args)
        status, index, msg = generate_tree_action(settings.generator_config())
        if status != CommandStatus.SUCCESS or index is None:
            formatted_print(msg, level="ERROR")
            sys.exit(1)
        formatted_print(msg, level="INFO")
        func(index, args)
    return wrapper

def handle_serve(args: argparse.Namespace) -> None:
    from .api import run_server # Flask is only needed when serving
    settings = _settings_from_args(args)
    if args.host:
        settings = replace(settings, host=args.host)
    if args.port:
        settings = replace(settings, port=args.port)
    run_server(settings)

def _print_rows(title: str, rows, row_count: int, indent: int = 1) -> None:
    formatted_print(f"{title} ({len(rows)} of {row_count})", level="RESULT", use_prefix=False, indent=indent)
    for node in rows:
        kind = "leaf" if node.is_leaf else "group"
        name = node.attributes.get("subPartCode", "")
        formatted_print(f"{node.id:>6}  {kind:<5}  depth={node.depth}  {name}", level="DETAIL", use_prefix=False, indent=indent + 1)

def _run_fetch(datasource: ServerSideDatasource, request: WindowRequest) -> None:
    row_model = InMemoryRowModel()
    status, response, msg = fetch_rows_action(datasource, request, row_model)
    if status != CommandStatus.SUCCESS or response is None:
        formatted_print(msg, level="ERROR")
        sys.exit(1)
    formatted_print(msg, level="SUCCESS")
    path_str = " -> ".join(request.group_path) if request.group_path else "(root)"
    _print_rows(f"Rows under {path_str}", response.rows, response.row_count)
    for route in row_model.applied_routes:
        for block in row_model.blocks[route]:
            _print_rows(f"Folded rows under {' -> '.join(route)}", block.rows, block.row_count)

def handle_rows(args: argparse.Namespace) -> None:
    """Handles fetching one window, locally or from a server."""
    if args.url:
        request = WindowRequest(args.group_path, args.start, args.end)
        with HttpTransport(args.url) as transport:
            _run_fetch(ServerSideDatasource(transport), request)
    else:
        _rows_local(args)

@tree_command
def _rows_local(index: TreeIndex, args: argparse.Namespace) -> None:
    request = WindowRequest(args.group_path, args.start, args.end)
    _run_fetch(ServerSideDatasource(LocalTransport(WindowResolver(index))), request)

@tree_command
def handle_tree(index: TreeIndex, args: argparse.Namespace) -> None:
    """Handles displaying the tree or a subtree."""
    if args.node_id:
        content = index.render_subtree(args.node_id, args.levels)
        if content is None:
            formatted_print(f"Node with ID '{args.node_id}' not found.", level="ERROR")
            sys.exit(1)
    else:
        content = index.render(args.levels)
    formatted_print(content, level="NONE", use_prefix=False)

@tree_command
def handle_path(index: TreeIndex, args: argparse.Namespace) -> None:
    """Handles showing a node's group path."""
    status, info, msg = node_info_action(index, args.node_id)
    if status != CommandStatus.SUCCESS or info is None:
        formatted_print(msg, level="ERROR")
        sys.exit(1)
    formatted_print(msg, level="INFO")
    formatted_print(f"Group path for its children: {' '.join(info['groupPath'])}", level="RESULT", use_prefix=False, indent=1)
    formatted_print(f"Children: {info['childCount']}", level="DETAIL", use_prefix=False, indent=2)

@tree_command
def handle_export(index: TreeIndex, args: argparse.Namespace) -> None:
    """Handles exporting the tree."""
    status, content, msg = export_tree_action(index, args.output_file, args.levels)
    if status != CommandStatus.SUCCESS:
        formatted_print(msg, level="ERROR")
        sys.exit(1)
    if content:
        formatted_print(content, level="NONE", use_prefix=False)
    else:
        formatted_print(msg, level="INFO")

def handle_help(args: argparse.Namespace) -> None:
    if args.command_name:
        help_text = get_specific_help_text(args.command_name[0])
        if "Unknown command" in help_text:
            formatted_print(help_text, level="ERROR")
            return
        for line_content in help_text.strip().split('\n'):
            if line_content.lower().startswith("usage:"):
                formatted_print(line_content, level="USAGE", use_prefix=True)
            else:
                formatted_print(line_content, level="NONE", use_prefix=False, indent=1)
    else:
        lines = get_general_help_text().strip().split('\n')
        formatted_print(lines[0], level="HEADER", use_prefix=False)
        for line_content in lines[1:]:
            if line_content.startswith("  "):
                formatted_print(line_content, level="COMMAND_NAME", use_prefix=False)
            elif line_content.strip():
                formatted_print(line_content.strip(), level="INFO", use_prefix=False, indent=1)

def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value}")
    return number

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="treegrid", description="Tree-windowed paging server and client")
    parser.add_argument("--seed", type=int, help="Seed for reproducible tree generation.")
    parser.add_argument("--max-depth", type=int, help="Generator max depth (>= 1).")
    parser.add_argument("--child-probability", type=float, help="Leaf probability for children past the 10th.")
    parser.add_argument("--total-nodes", type=int, help="Number of nodes to generate.")

    subparsers = parser.add_subparsers(dest="command", title="Available commands")
    subparsers.required = True

    p_serve = subparsers.add_parser("serve", help=command_summary("serve"))
    p_serve.add_argument("--host", help="Bind address.")
    p_serve.add_argument("--port", type=int, help="Port to listen on.")
    p_serve.set_defaults(func=handle_serve)

    p_rows = subparsers.add_parser("rows", aliases=["ls", "get"], help=command_summary("rows"))
    p_rows.add_argument("group_path", nargs="*", help="Group path: node ids from a root down to the parent.")
    p_rows.add_argument("--start", type=_non_negative_int, default=0, help="First row (inclusive).")
    p_rows.add_argument("--end", type=_non_negative_int, default=20, help="Last row (exclusive).")
    p_rows.add_argument("--url", help="Base URL of a running treegrid server.")
    p_rows.set_defaults(func=handle_rows)

    p_tree = subparsers.add_parser("tree", aliases=["show"], help=command_summary("tree"))
    p_tree.add_argument("node_id", nargs="?", help="Start node (default: whole tree).")
    p_tree.add_argument("--levels", type=_non_negative_int, help="Levels to show below the start node.")
    p_tree.set_defaults(func=handle_tree)

    p_path = subparsers.add_parser("path", help=command_summary("path"))
    p_path.add_argument("node_id", help="Node ID.")
    p_path.set_defaults(func=handle_path)

    p_export = subparsers.add_parser("export", help=command_summary("export"))
    p_export.add_argument("output_file", nargs="?", help="Optional .txt file to save export.")
    p_export.add_argument("--levels", type=_non_negative_int, help="Levels to export below each root.")
    p_export.set_defaults(func=handle_export)

    p_help = subparsers.add_parser("help", aliases=["h"], help=command_summary("help"), add_help=False)
    p_help.add_argument('command_name', nargs='*', help="Command to get help for.")
    p_help.set_defaults(func=handle_help)
    return parser

def main_cli(argv: Optional[list] = None) -> None:
    if argv is None:
        argv = sys.argv[1:]
    if not argv:
        formatted_print(get_general_help_text(), level="NONE", use_prefix=False)
        sys.exit(0)

    parser = build_parser()
    parsed_args = parser.parse_args(argv)
    parsed_args.func(parsed_args)

if __name__ == "__main__":
    main_cli()
