# treegrid/api.py
import threading
import time
from typing import Optional
from flask import Flask, request, jsonify
from flask_cors import CORS # For Cross-Origin Resource Sharing

from .config import Settings, load_settings
from .tree_index import TreeIndex
from .resolver import WindowResolver
from .commands_core import (
    CommandStatus,
    generate_tree_action,
    parse_window_request,
    get_rows_action,
    node_info_action,
)
from .display_utils import formatted_print

app = Flask(__name__)
CORS(app) # This will enable CORS for all routes

# --- Global state for the API ---
# The index is built once, behind _init_lock, and is read-only afterwards,
# so request handlers share it without further locking.
api_settings: Optional[Settings] = None
api_resolver: Optional[WindowResolver] = None
_init_lock = threading.Lock()
# --- End Global State ---

_HTTP_STATUS = {
    CommandStatus.NOT_FOUND: 404,
    CommandStatus.INVALID_RANGE: 400,
    CommandStatus.ERROR: 400,
}

def configure(settings: Optional[Settings] = None, index: Optional[TreeIndex] = None) -> None:
    """Installs settings and, optionally, a prebuilt index. Must run before serving requests."""
    global api_settings, api_resolver
    with _init_lock:
        api_settings = settings
        api_resolver = WindowResolver(index) if index is not None else None

def get_resolver() -> WindowResolver:
    """Returns the shared resolver, generating the tree on first use."""
    global api_settings, api_resolver
    if api_resolver is not None:
        return api_resolver
    with _init_lock:
        if api_resolver is None:
            if api_settings is None:
                api_settings = load_settings()
            status, index, msg = generate_tree_action(api_settings.generator_config())
            if status != CommandStatus.SUCCESS or index is None:
                raise RuntimeError(msg)
            formatted_print(msg, level="INFO")
            api_resolver = WindowResolver(index)
    return api_resolver

def _error(status: str, msg: str, **extra):
    body = {"status": status, "message": msg}
    body.update(extra)
    return jsonify(body), _HTTP_STATUS.get(status, 400)

# --- API Endpoints ---

@app.route('/getRows', methods=['POST'])
def api_get_rows():
    data = request.get_json(silent=True)
    status, window_request, msg = parse_window_request(data)
    if status != CommandStatus.SUCCESS:
        return _error(status, msg)

    resolver = get_resolver()
    formatted_print(f"getRows {window_request}", level="DEBUG")
    if api_settings is not None and api_settings.response_delay_ms > 0:
        time.sleep(api_settings.response_delay_ms / 1000.0)

    status, response, msg = get_rows_action(resolver, window_request)
    if status != CommandStatus.SUCCESS:
        group_key = WindowResolver.group_key(window_request.group_path)
        return _error(status, msg, groupKey=group_key)

    body = response.to_dict()
    body.update({"status": status, "message": msg})
    return jsonify(body), 200

@app.route('/node/<node_id>', methods=['GET'])
def api_get_node(node_id: str):
    resolver = get_resolver()
    status, info, msg = node_info_action(resolver.index, node_id)
    if status != CommandStatus.SUCCESS:
        return _error(status, msg)
    return jsonify({"status": status, "message": msg, **info}), 200

@app.route('/status', methods=['GET'])
def api_status_check():
    """A simple endpoint to check if the API is running."""
    resolver = get_resolver()
    return jsonify({"status": "ok", "message": "treegrid API is running.", "nodeCount": len(resolver.index)}), 200


def run_server(settings: Optional[Settings] = None, debug: bool = False) -> None:
    settings = settings if settings is not None else load_settings()
    configure(settings)
    get_resolver() # Build the tree before accepting requests
    formatted_print(f"Serving on http://{settings.host}:{settings.port}", level="INFO")
    app.run(debug=debug, host=settings.host, port=settings.port, use_reloader=False)


if __name__ == '__main__':
    run_server()
