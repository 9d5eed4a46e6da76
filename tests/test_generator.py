"""Tests for the synthetic tree generator."""

import random
from collections import deque

import pytest

from treegrid import GeneratorConfig, InvalidConfigError, TreeGenerator, generate
from treegrid.generator import MAX_CHILDREN, MIN_CHILDREN
from treegrid.tree_index import ROOT_KEY


def _structure(index):
    return {key: index.child_ids(key) for key in index.group_keys()}


class TestGeneratorConfig:
    """Tests for configuration validation."""

    @pytest.mark.parametrize("kwargs", [
        {"total_node_count": 0},
        {"total_node_count": -5},
        {"max_depth": 0},
        {"child_probability": 1.5},
        {"child_probability": -0.1},
        {"child_probability": "high"},
        {"total_node_count": 10.5},
    ])
    def test_invalid_config_rejected(self, kwargs):
        """Test bad configs fail before any node is built."""
        with pytest.raises(InvalidConfigError):
            generate(GeneratorConfig(**kwargs))

    def test_defaults_are_valid(self):
        """Test default config validates."""
        GeneratorConfig().validate()


class TestGeneration:
    """Tests for generated tree shape and invariants."""

    def test_single_node_tree(self):
        """Test a one-node tree is a lone leaf root."""
        index = generate(GeneratorConfig(total_node_count=1, seed=1))
        assert len(index) == 1
        assert index.root_ids == ("0",)
        root = index.get_node("0")
        assert root.is_leaf is True
        assert root.parent_id is None
        assert root.depth == 0
        assert not index.has_group("0")

    @pytest.mark.parametrize("total", [2, 11, 50, 333, 1000])
    def test_exact_node_count(self, total):
        """Test generation stops at exactly total_node_count nodes."""
        index = generate(GeneratorConfig(total_node_count=total, seed=3))
        assert len(index) == total

    def test_ids_are_monotonic(self, generated_index):
        """Test ids are 0..n-1 in creation order."""
        assert sorted(int(node.id) for node in generated_index) == list(range(len(generated_index)))

    def test_every_node_reachable_from_root(self, generated_index):
        """Test walking the index from the root sentinel reaches every node once."""
        seen = []
        queue = deque(generated_index.child_ids(ROOT_KEY))
        while queue:
            node_id = queue.popleft()
            seen.append(node_id)
            queue.extend(generated_index.child_ids(node_id) or ())
        assert len(seen) == len(set(seen)) == len(generated_index)

    def test_parent_ids_point_inside_tree(self, generated_index):
        """Test no parent id refers outside the generated set."""
        for node in generated_index:
            if node.parent_id is not None:
                assert node.parent_id in generated_index
                assert node.id in generated_index.child_ids(node.parent_id)

    def test_leaf_iff_no_index_entry(self, generated_index):
        """Test the leaf invariant."""
        for node in generated_index:
            assert node.is_leaf == (not generated_index.has_group(node.id))

    def test_depth_is_parent_depth_plus_one(self, generated_index):
        """Test the depth invariant."""
        for node in generated_index:
            if node.parent_id is None:
                assert node.depth == 0
            else:
                assert node.depth == generated_index.get_node(node.parent_id).depth + 1

    def test_root_entry_holds_only_root(self, generated_index):
        """Test the root sentinel lists the single root."""
        assert generated_index.child_ids(ROOT_KEY) == ("0",)

    def test_child_counts_within_bounds(self, generated_index):
        """Test each parent got 10-29 children, except possibly the batch cut short at the end."""
        counts = [len(generated_index.child_ids(key)) for key in generated_index.group_keys() if key != ROOT_KEY]
        assert all(count <= MAX_CHILDREN for count in counts)
        assert sum(1 for count in counts if count < MIN_CHILDREN) <= 1

    def test_zero_probability_never_creates_leaves(self):
        """Test with probability 0, only childless nodes are leaves and the first child branches."""
        index = generate(GeneratorConfig(max_depth=3, child_probability=0, total_node_count=50, seed=11))
        assert len(index) == 50
        assert index.get_node("1").is_leaf is False
        for node in index:
            if node.is_leaf:
                assert not index.has_group(node.id)

    def test_full_probability_makes_tail_children_leaves(self):
        """Test with probability 1 every child past the 10th is a leaf."""
        index = generate(GeneratorConfig(child_probability=1.0, total_node_count=800, seed=5))
        for key in index.group_keys():
            if key == ROOT_KEY:
                continue
            for child in index.get_children_nodes(key)[MIN_CHILDREN:]:
                assert child.is_leaf is True

    def test_business_attributes(self, generated_index):
        """Test nodes carry display attributes and a level path."""
        root = generated_index.get_node("0")
        assert root.attributes["subPartCode"] == "002-01"
        node = generated_index.get_node("5")
        assert node.attributes["lineNum"] == "BOM 6"
        assert node.attributes["levelPath"] == "0/5"
        for field in ("activeStatus", "operationType", "countPath", "subPartMeasurementUnit", "subPartPartTypePartTypeName"):
            assert node.attributes[field] == 6

    def test_generated_nodes_are_read_only(self, generated_index):
        """Test built nodes reject field and attribute writes."""
        node = generated_index.get_node("5")
        with pytest.raises(AttributeError):
            node.is_leaf = not node.is_leaf
        with pytest.raises(TypeError):
            node.attributes["subPartCode"] = "changed"
        assert generated_index.get_node("5").attributes["subPartCode"] == node.attributes["subPartCode"]


class TestDeterminism:
    """Tests for seeded reproducibility."""

    def test_same_seed_same_tree(self):
        """Test two runs with one seed produce identical trees."""
        config = GeneratorConfig(total_node_count=400, seed=99)
        assert _structure(generate(config)) == _structure(generate(config))

    def test_injected_rng_matches_seed(self):
        """Test an injected Random behaves like the config seed."""
        config = GeneratorConfig(total_node_count=300, seed=7)
        injected = generate(GeneratorConfig(total_node_count=300), rng=random.Random(7))
        assert _structure(injected) == _structure(generate(config))

    def test_different_seeds_differ(self):
        """Test different seeds give different shapes."""
        a = generate(GeneratorConfig(total_node_count=400, seed=1))
        b = generate(GeneratorConfig(total_node_count=400, seed=2))
        assert _structure(a) != _structure(b)

    def test_generator_is_single_use(self):
        """Test a generator refuses to run twice."""
        generator = TreeGenerator(GeneratorConfig(total_node_count=20, seed=1))
        generator.generate()
        with pytest.raises(RuntimeError):
            generator.generate()


class TestFallbackParent:
    """Tests for the fallback parent scan."""

    def test_defaults_to_root_when_nothing_shallow_enough(self):
        """Test max_depth=1 leaves only the root as fallback."""
        generator = TreeGenerator(GeneratorConfig(max_depth=1, total_node_count=30, seed=1))
        generator.generate()
        assert generator._find_fallback_parent().id == "0"

    def test_picks_latest_shallow_non_leaf(self):
        """Test the scan runs newest-first and respects the depth limit."""
        generator = TreeGenerator(GeneratorConfig(max_depth=3, child_probability=0, total_node_count=60, seed=1))
        generator.generate()
        parent = generator._find_fallback_parent()
        assert parent.depth < 2
        assert not parent.is_leaf
        shallower = [n for n in generator._created if not n.is_leaf and n.depth < 2]
        assert parent is shallower[-1]
