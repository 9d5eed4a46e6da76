# treegrid/exceptions.py
"""Errors raised by the tree index, generator and window resolver."""


class TreeGridError(Exception):
    """Base class for all treegrid errors."""


class UnknownGroupError(TreeGridError):
    """The requested group key has no child list (unknown node, or a leaf)."""

    def __init__(self, group_key: str):
        self.group_key = group_key
        super().__init__(f"No child list for group '{group_key}' (unknown node or leaf).")


class InvalidRangeError(TreeGridError):
    """The requested row window is malformed."""

    def __init__(self, start_row, end_row, reason: str = ""):
        self.start_row = start_row
        self.end_row = end_row
        detail = f": {reason}" if reason else ""
        super().__init__(f"Invalid row window [{start_row}, {end_row}){detail}")


class InvalidConfigError(TreeGridError):
    """Generator or settings configuration is invalid."""
