# treegrid/display_utils.py
import os
import sys

USE_COLORS = sys.stdout.isatty() and not os.environ.get("NO_COLOR")
DEBUG_ENABLED = bool(os.environ.get("TREEGRID_DEBUG"))

class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    GREY = "\033[90m"

# level -> (prefix, color, goes to stderr)
_LEVEL_STYLES = {
    "INFO": ("[INFO]", Colors.BLUE, False),
    "SUCCESS": ("[OK]", Colors.GREEN, False),
    "WARNING": ("[WARN]", Colors.YELLOW, True),
    "ERROR": ("[ERROR]", Colors.RED, True),
    "DEBUG": ("[DEBUG]", Colors.GREY, True),
    "RESULT": ("", Colors.CYAN, False),
    "DETAIL": ("", Colors.GREY, False),
    "USAGE": ("Usage:", Colors.MAGENTA, False),
    "HEADER": ("", Colors.BOLD, False),
    "COMMAND_NAME": ("", Colors.CYAN, False),
    "NONE": ("", "", False),
}

def formatted_print(message: str, level: str = "INFO", use_prefix: bool = True, indent: int = 0):
    """Prints a message with an optional level prefix, color and indentation.

    WARNING, ERROR and DEBUG go to stderr; DEBUG is dropped unless TREEGRID_DEBUG is set.
    """
    level = level.upper()
    if level == "DEBUG" and not DEBUG_ENABLED:
        return
    prefix, color, to_stderr = _LEVEL_STYLES.get(level, _LEVEL_STYLES["NONE"])

    if level == "USAGE" and message.lower().startswith("usage:"):
        message = message[len("usage:"):].lstrip() # Prefix already says it

    text = f"{prefix} {message}" if use_prefix and prefix else message
    text = "  " * indent + text
    if USE_COLORS and color:
        text = f"{color}{text}{Colors.RESET}"

    stream = sys.stderr if to_stderr else sys.stdout
    print(text, file=stream, flush=True)
