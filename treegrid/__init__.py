# treegrid/__init__.py
"""Tree-windowed paging: a synthetic tree index, a window resolver and a folding datasource."""

__version__ = "0.1.0"

from .models import Node, WindowRequest, WindowResponse
from .exceptions import TreeGridError, UnknownGroupError, InvalidRangeError, InvalidConfigError
from .generator import GeneratorConfig, TreeGenerator, generate
from .tree_index import ROOT_KEY, TreeIndex
from .resolver import WindowResolver
from .datasource import InMemoryRowModel, ServerSideDatasource, deep_apply
from .transport import HttpTransport, LocalTransport
