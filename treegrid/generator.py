# treegrid/generator.py
"""Synthetic tree generator.

Builds a "bushy near the top, deep on the fringe" tree: parents are taken from a FIFO
queue of non-leaf nodes that have not been given children yet, each parent gets 10-29
children, and children past the 10th may become leaves. The result is frozen into a
TreeIndex and never changes afterwards.
"""
import math
import random
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, List, Optional
from .models import Node
from .tree_index import ROOT_KEY, TreeIndex
from .exceptions import InvalidConfigError
from .display_utils import formatted_print

MIN_CHILDREN = 10
MAX_CHILDREN = 29
ROOT_PART_CODE = "002-01"

@dataclass(frozen=True)
class GeneratorConfig:
    max_depth: int = 3
    child_probability: float = 0.3 # Chance that a child past the 10th becomes a leaf
    total_node_count: int = 1000
    seed: Optional[int] = None

    def validate(self) -> None:
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int) or self.max_depth < 1:
            raise InvalidConfigError(f"max_depth must be an integer >= 1, got {self.max_depth!r}")
        if isinstance(self.child_probability, bool) or not isinstance(self.child_probability, (int, float)):
            raise InvalidConfigError(f"child_probability must be a number, got {self.child_probability!r}")
        if not 0.0 <= self.child_probability <= 1.0:
            raise InvalidConfigError(f"child_probability must be within [0, 1], got {self.child_probability}")
        if isinstance(self.total_node_count, bool) or not isinstance(self.total_node_count, int) or self.total_node_count < 1:
            raise InvalidConfigError(f"total_node_count must be an integer >= 1, got {self.total_node_count!r}")


class _DraftNode:
    """Mutable node used while the tree grows; frozen into a Node at the end."""
    __slots__ = ("id", "parent_id", "is_leaf", "depth", "attributes")

    def __init__(self, node_id: str, parent_id: Optional[str], is_leaf: bool, depth: int, attributes: Dict[str, Any]):
        self.id = node_id
        self.parent_id = parent_id
        self.is_leaf = is_leaf
        self.depth = depth
        self.attributes = attributes

    def freeze(self) -> Node:
        return Node(self.id, parent_id=self.parent_id, is_leaf=self.is_leaf, depth=self.depth, attributes=self.attributes)


class TreeGenerator:
    """Generates one tree per `generate()` call from a config and a random source."""

    def __init__(self, config: GeneratorConfig, rng: Optional[random.Random] = None):
        config.validate()
        self.config = config
        self.rng = rng if rng is not None else random.Random(config.seed)
        self._next_id = 0
        self._created: List[_DraftNode] = []
        self._children: Dict[str, List[str]] = {}

    def _new_node(self, parent: Optional[_DraftNode], is_leaf: bool) -> _DraftNode:
        node_id = str(self._next_id)
        self._next_id += 1
        if parent is None:
            node = _DraftNode(node_id, None, is_leaf, 0, {
                "subPartCode": ROOT_PART_CODE,
                "levelPath": node_id,
            })
        else:
            number = self._next_id
            node = _DraftNode(node_id, parent.id, is_leaf, parent.depth + 1, {
                "lineNum": f"BOM {number}",
                "subPartCode": f"PART-{number}",
                "bomStatus": number,
                "activeStatus": number,
                "operationType": number,
                "quantity": number,
                "countPath": number,
                "subPartMeasurementUnit": number,
                "subPartPartTypePartTypeName": number,
                "levelPath": f"{parent.attributes['levelPath']}/{node_id}",
            })
            self._children.setdefault(parent.id, []).append(node_id)
        self._created.append(node)
        return node

    def _find_fallback_parent(self) -> _DraftNode:
        """Most recently created non-leaf node shallow enough to take children, else the root."""
        depth_limit = min(self.config.max_depth - 1, int(math.log2(len(self._created))))
        for node in reversed(self._created):
            if not node.is_leaf and node.depth < depth_limit:
                return node
        return self._created[0]

    def generate(self) -> TreeIndex:
        if self._created:
            raise RuntimeError("TreeGenerator instances generate a single tree; create a new one.")
        total = self.config.total_node_count
        probability = self.config.child_probability

        root = self._new_node(None, is_leaf=False)
        pending: Deque[_DraftNode] = deque([root])

        while len(self._created) < total:
            parent = pending.popleft() if pending else self._find_fallback_parent()
            child_count = self.rng.randint(MIN_CHILDREN, MAX_CHILDREN)
            for position in range(child_count):
                if len(self._created) >= total:
                    break
                is_leaf = position >= MIN_CHILDREN and self.rng.random() < probability
                child = self._new_node(parent, is_leaf)
                if not is_leaf:
                    pending.append(child)

        # Queued parents that never got children are leaves
        for node in self._created:
            if not node.is_leaf and node.id not in self._children:
                node.is_leaf = True

        children = dict(self._children)
        children[ROOT_KEY] = [root.id]
        index = TreeIndex({node.id: node.freeze() for node in self._created}, children)
        formatted_print(
            f"Generated {len(index)} nodes in {len(children) - 1} groups "
            f"(max_depth={self.config.max_depth}, child_probability={probability}, seed={self.config.seed})",
            level="DEBUG",
        )
        return index


def generate(config: GeneratorConfig, rng: Optional[random.Random] = None) -> TreeIndex:
    """Builds a new immutable TreeIndex from `config`."""
    return TreeGenerator(config, rng).generate()
