"""Tests for next-pair selection."""

import random

from pairwise_rank.core.config import RankingConfig
from pairwise_rank.models import Item
from pairwise_rank.ranking import create_pair_selector
from pairwise_rank.ranking.pairing import PairSelector


class ScriptedRng:
    """Random source returning queued values."""

    def __init__(self, indices=(), coins=()):
        self.indices = list(indices)
        self.coins = list(coins)

    def randrange(self, stop):
        value = self.indices.pop(0)
        assert 0 <= value < stop
        return value

    def random(self):
        return self.coins.pop(0)


class TestCandidates:
    """Tests for the eligible-candidate window."""

    def test_sorted_by_rating_descending(self):
        """Test candidates come back highest rating first."""
        items = [Item("a", 1400), Item("b", 1600), Item("c", 1500)]
        selector = PairSelector(rng=random.Random(0))

        assert [i.id for i in selector.candidates(items)] == ["b", "c", "a"]

    def test_tolerance_window(self):
        """Test only items within tolerance of the minimum count are eligible."""
        items = [
            Item("a", comparisons=0),
            Item("b", comparisons=2),
            Item("c", comparisons=3),
        ]
        selector = PairSelector(rng=random.Random(0), count_tolerance=2)

        assert {i.id for i in selector.candidates(items)} == {"a", "b"}

    def test_target_comparisons_excludes_finished_items(self):
        """Test items at the target count are never offered."""
        items = [
            Item("a", comparisons=5),
            Item("b", comparisons=4),
            Item("c", comparisons=4),
        ]
        selector = PairSelector(rng=random.Random(0), target_comparisons=5)

        assert {i.id for i in selector.candidates(items)} == {"b", "c"}

    def test_duplicate_ids_collapse(self):
        """Test the same item passed twice is only a candidate once."""
        item = Item("a")
        selector = PairSelector(rng=random.Random(0))

        assert selector.candidates([item, item]) == [item]


class TestNextPair:
    """Tests for PairSelector.next_pair."""

    def test_adjacent_pair_without_swap(self):
        """Test the drawn index picks neighbours in rating order."""
        items = [Item("a", 1600), Item("b", 1550), Item("c", 1500)]
        selector = PairSelector(rng=ScriptedRng(indices=[1], coins=[0.9]))

        assert selector.next_pair(items) == ("b", "c")

    def test_coin_flip_swaps_order(self):
        """Test a low coin swaps the displayed order."""
        items = [Item("a", 1600), Item("b", 1550), Item("c", 1500)]
        selector = PairSelector(rng=ScriptedRng(indices=[0], coins=[0.1]))

        assert selector.next_pair(items) == ("b", "a")

    def test_zero_swap_probability_never_swaps(self):
        """Test swap_probability=0 keeps rating order."""
        items = [Item("a", 1600), Item("b", 1550)]
        selector = PairSelector(rng=ScriptedRng(indices=[0], coins=[0.0]), swap_probability=0.0)

        assert selector.next_pair(items) == ("a", "b")

    def test_three_fresh_items_always_pair(self):
        """Test three default items always yield two of the three."""
        items = [Item("a"), Item("b"), Item("c")]
        for seed in range(50):
            pair = PairSelector(rng=random.Random(seed)).next_pair(items)
            assert pair is not None
            assert set(pair) <= {"a", "b", "c"}
            assert pair[0] != pair[1]

    def test_well_compared_item_is_held_back(self):
        """Test an item 3 comparisons ahead waits for the others to catch up."""
        items = [Item("a", 1540, comparisons=3), Item("b"), Item("c")]
        for seed in range(50):
            pair = PairSelector(rng=random.Random(seed)).next_pair(items)
            assert set(pair) == {"b", "c"}

    def test_held_back_item_returns_within_tolerance(self):
        """Test the item is offered again once the others are within tolerance."""
        items = [Item("a", comparisons=3), Item("b", comparisons=1), Item("c", comparisons=1)]
        seen = set()
        for seed in range(50):
            seen.update(PairSelector(rng=random.Random(seed)).next_pair(items))
        assert "a" in seen

    def test_never_returns_same_item_twice(self):
        """Test pairs are always two distinct IDs across varied states."""
        rng = random.Random(3)
        selector = PairSelector(rng=rng)
        for _ in range(200):
            items = [
                Item(f"i{n}", rng.uniform(1300, 1700), comparisons=rng.randint(0, 4))
                for n in range(6)
            ]
            pair = selector.next_pair(items)
            if pair is not None:
                assert pair[0] != pair[1]

    def test_isolated_item_returns_none(self):
        """Test a lone least-compared item means no valid pair."""
        items = [Item("a"), Item("b", comparisons=5), Item("c", comparisons=5)]
        selector = PairSelector(rng=random.Random(0))

        assert selector.next_pair(items) is None

    def test_empty_and_single(self):
        """Test fewer than two items yields None."""
        selector = PairSelector(rng=random.Random(0))
        assert selector.next_pair([]) is None
        assert selector.next_pair([Item("a")]) is None

    def test_all_items_at_target(self):
        """Test reaching the target count everywhere yields None."""
        items = [Item("a", comparisons=2), Item("b", comparisons=2)]
        selector = PairSelector(rng=random.Random(0), target_comparisons=2)

        assert selector.next_pair(items) is None

    def test_deterministic_with_seed(self):
        """Test the same seed draws the same sequence of pairs."""
        items = [Item(name) for name in "abcdef"]
        first = PairSelector(rng=random.Random(42))
        second = PairSelector(rng=random.Random(42))

        assert [first.next_pair(items) for _ in range(20)] == [
            second.next_pair(items) for _ in range(20)
        ]


class TestCreatePairSelector:
    """Tests for building a selector from config."""

    def test_uses_config_values(self):
        """Test config values are carried onto the selector."""
        config = RankingConfig(
            initial_rating=1000.0,
            count_tolerance=1,
            swap_probability=0.25,
            target_comparisons=8,
        )
        selector = create_pair_selector(config, seed=1)

        assert selector.initial_rating == 1000.0
        assert selector.count_tolerance == 1
        assert selector.swap_probability == 0.25
        assert selector.target_comparisons == 8

    def test_explicit_rng_wins(self):
        """Test an injected random source is used as-is."""
        rng = ScriptedRng()
        assert create_pair_selector(RankingConfig(), rng=rng, seed=5).rng is rng
