"""
Unit tests for weight edits.
"""

import math

import pytest

from price_index_mcp.core.builder import build_tree
from price_index_mcp.core.exceptions import CategoryNotFoundError, InvalidWeightError
from price_index_mcp.core.rebalancer import rebalance, scale_subtree
from price_index_mcp.core.tree import check_invariants, find_category, walk


@pytest.fixture
def tree(food_records, make_record):
    """Aggregated tree with a three-level branch under 01.1."""
    records = food_records + [
        make_record("01.1.1", 4, (100, 100, 110, 115, 118)),
        make_record("01.1.2", 6, (100, 116, 118, 120, 121)),
    ]
    return build_tree(records)


def weight(tree, code: str) -> float:
    node = find_category(tree, code)
    assert node is not None
    return node.weight


@pytest.mark.unit
class TestRebalanceParent:
    """Tests for edits on categories with children."""

    def test_children_scale_proportionally(self, food_records) -> None:
        """Test the 01 -> 60 example: children go to 20 and 40."""
        tree = build_tree(food_records)
        result = rebalance(tree, "01", 60)

        assert weight(result, "01") == 60
        assert weight(result, "01.1") == pytest.approx(20.0)
        assert weight(result, "01.2") == pytest.approx(40.0)

    def test_index_values_survive_uniform_scaling(self, food_records) -> None:
        """Test that 01 keeps its newest index of 140 after the edit."""
        result = rebalance(build_tree(food_records), "01", 60)
        assert find_category(result, "01").newest == pytest.approx(140.0)

    def test_scaling_reaches_all_descendants(self, tree) -> None:
        """Test that grandchildren are rescaled along with children."""
        result = rebalance(tree, "01", 15)

        assert weight(result, "01.1") == pytest.approx(5.0)
        assert weight(result, "01.1.1") == pytest.approx(2.0)
        assert weight(result, "01.1.2") == pytest.approx(3.0)
        assert weight(result, "01.2") == pytest.approx(10.0)

    def test_proportions_between_descendants_are_preserved(self, tree) -> None:
        """Test that every descendant ratio is unchanged by the edit."""
        result = rebalance(tree, "01", 45)
        codes = ["01.1", "01.1.1", "01.1.2", "01.2"]

        before = [weight(tree, code) for code in codes]
        after = [weight(result, code) for code in codes]
        for i in range(len(codes)):
            for j in range(len(codes)):
                assert after[i] / after[j] == pytest.approx(before[i] / before[j])

    def test_zero_weight_children_stay_unchanged(self, make_record) -> None:
        """Test the degenerate case where the children weigh nothing."""
        tree = build_tree(
            [
                make_record("01", 10, (100, 100, 100, 100, 100)),
                make_record("01.1", 0, (100, 100, 100, 100, 120)),
                make_record("01.2", 0, (100, 100, 100, 100, 130)),
            ]
        )
        result = rebalance(tree, "01", 25)

        assert weight(result, "01") == 25
        assert weight(result, "01.1") == 0
        assert weight(result, "01.2") == 0
        # No child contributes weight, so 01 keeps its own readings
        assert find_category(result, "01").newest == pytest.approx(100.0)
        assert result.weight == 25

    def test_children_index_values_are_not_recomputed(self, tree) -> None:
        """Test that only weights propagate downward."""
        result = rebalance(tree, "01", 90)
        for code in ("01.1", "01.1.1", "01.1.2", "01.2"):
            assert find_category(result, code).index_values == find_category(tree, code).index_values


@pytest.mark.unit
class TestRebalanceLeaf:
    """Tests for edits on leaf categories."""

    def test_leaf_weight_is_set(self, food_records) -> None:
        """Test that a leaf edit only changes the leaf's weight."""
        tree = build_tree(food_records)
        result = rebalance(tree, "01.1", 30)

        leaf = find_category(result, "01.1")
        assert leaf.weight == 30
        assert leaf.index_values == find_category(tree, "01.1").index_values

    def test_ancestors_are_recomputed(self, food_records) -> None:
        """Test that weights and indices move up to the root."""
        result = rebalance(build_tree(food_records), "01.1", 30)

        food = find_category(result, "01")
        assert food.weight == pytest.approx(50.0)
        # (120 * 30 + 150 * 20) / 50
        assert food.newest == pytest.approx(132.0)
        assert food.variation.yearly == pytest.approx(32.0)

        assert result.weight == pytest.approx(120.0)
        assert result.newest == pytest.approx((132 * 50 + 110 * 70) / 120)

    def test_setting_leaf_to_zero(self, food_records) -> None:
        """Test that a zero weight removes the leaf from parent means."""
        result = rebalance(build_tree(food_records), "01.1", 0)

        food = find_category(result, "01")
        assert food.weight == pytest.approx(20.0)
        assert food.newest == pytest.approx(150.0)


@pytest.mark.unit
class TestRebalanceContract:
    """Tests for snapshot semantics, idempotence and errors."""

    def test_previous_snapshot_is_unchanged(self, tree) -> None:
        """Test that the input tree is not mutated."""
        before = tree.model_dump()
        rebalance(tree, "01.1.1", 50)
        assert tree.model_dump() == before

    def test_untouched_branches_are_shared(self, tree) -> None:
        """Test that branches off the edited path are reused by reference."""
        result = rebalance(tree, "01.1.1", 50)

        assert result.children[1] is tree.children[1]
        assert result.children[0].children[1] is tree.children[0].children[1]
        assert result.children[0] is not tree.children[0]

    def test_idempotence(self, tree) -> None:
        """Test that applying the same edit twice equals applying it once."""
        once = rebalance(tree, "01", 60)
        twice = rebalance(once, "01", 60)
        assert twice == once

    @pytest.mark.parametrize("new_weight", [7.7, 0.7, 1.1, 3.3, 0.3])
    def test_idempotence_with_fractional_weights(self, make_record, new_weight) -> None:
        """Test that repeating an edit with non-integral ratios changes nothing."""
        tree = build_tree(
            [
                make_record("01", 6, (100, 100, 100, 100, 100)),
                make_record("01.1", 1, (100, 101, 102, 103, 104)),
                make_record("01.2", 2, (100, 105, 110, 115, 120)),
                make_record("01.3", 3, (100, 99, 98, 97, 96)),
                make_record("02", 4, (100, 100, 100, 100, 110)),
            ]
        )
        once = rebalance(tree, "01", new_weight)
        twice = rebalance(once, "01", new_weight)

        assert twice == once
        assert weight(once, "01") == new_weight

    @pytest.mark.parametrize("code,new_weight", [("01", 12), ("01.1", 3), ("01.1.2", 9), ("02", 0), ("index0", 500)])
    def test_invariants_hold_after_edit(self, tree, code, new_weight) -> None:
        """Test that weight sums stay consistent after any edit."""
        result = rebalance(tree, code, new_weight)
        assert check_invariants(result) == []
        assert weight(result, code) == pytest.approx(new_weight)

    def test_root_edit_rescales_everything(self, tree) -> None:
        """Test that editing the root scales every category."""
        result = rebalance(tree, "index0", 200)
        for (old, _), (new, _) in zip(walk(tree), walk(result)):
            assert new.weight == pytest.approx(old.weight * 2)

    def test_unknown_code_raises(self, tree) -> None:
        """Test that a missing category is reported explicitly."""
        with pytest.raises(CategoryNotFoundError) as exc_info:
            rebalance(tree, "99.9", 10)
        assert exc_info.value.code == "99.9"

    @pytest.mark.parametrize("bad_weight", [-1, -0.5, math.nan, math.inf, "10", None, True])
    def test_invalid_weight_raises(self, tree, bad_weight) -> None:
        """Test that negative and non-numeric weights are rejected."""
        with pytest.raises(InvalidWeightError):
            rebalance(tree, "01", bad_weight)


@pytest.mark.unit
def test_scale_subtree_multiplies_every_weight(tree) -> None:
    """Test the recursive weight scaling helper."""
    food = find_category(tree, "01")
    scaled = scale_subtree(food, 0.5)
    for (old, _), (new, _) in zip(walk(food), walk(scaled)):
        assert new.weight == pytest.approx(old.weight / 2)
        assert new.index_values == old.index_values
