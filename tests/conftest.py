"""Shared fixtures: a small hand-built tree and a seeded generated tree."""

from collections import deque

import pytest

from treegrid import GeneratorConfig, Node, TreeIndex, WindowResolver, generate
from treegrid.tree_index import ROOT_KEY


def build_index(children):
    """Builds a TreeIndex from a {group_key: [child ids]} mapping."""
    nodes = {}
    queue = deque()
    for root_id in children[ROOT_KEY]:
        nodes[root_id] = Node(root_id, is_leaf=root_id not in children, depth=0)
        queue.append(root_id)
    while queue:
        parent_id = queue.popleft()
        for child_id in children.get(parent_id, []):
            nodes[child_id] = Node(
                child_id,
                parent_id=parent_id,
                is_leaf=child_id not in children,
                depth=nodes[parent_id].depth + 1,
                attributes={"subPartCode": f"PART-{child_id}"},
            )
            queue.append(child_id)
    return TreeIndex(nodes, children)


def _ids(first, last):
    return [str(i) for i in range(first, last + 1)]


# root sentinel -> "0"; "0" has 12 children ("1".."12")
# "1" has 30 children, "2" has one, "3" has 12, "13" (first child of "1") has 3
SAMPLE_CHILDREN = {
    ROOT_KEY: ["0"],
    "0": _ids(1, 12),
    "1": _ids(13, 42),
    "2": ["58"],
    "3": _ids(43, 54),
    "13": _ids(55, 57),
}


@pytest.fixture
def sample_index():
    return build_index(SAMPLE_CHILDREN)


@pytest.fixture
def sample_resolver(sample_index):
    return WindowResolver(sample_index)


@pytest.fixture
def generated_index():
    return generate(GeneratorConfig(max_depth=3, child_probability=0.3, total_node_count=500, seed=42))
