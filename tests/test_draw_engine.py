import math
import random
from collections import Counter

import pytest

from conftest import make_item
from lootcase.domain.draw_engine import WeightedDrawEngine, group_items_by_rarity
from lootcase.domain.rarities import RARITIES, effective_chances, validate_rarity_table
from lootcase.models.schema_models import RaritySchema


class ScriptedRandom:
    """Returns preset values for random() and always the first index for randrange()."""

    def __init__(self, values, index=0):
        self.values = list(values)
        self.index = index

    def random(self):
        return self.values.pop(0)

    def randrange(self, stop):
        return self.index % stop


def test_group_items_by_rarity_keeps_order_and_skips_missing_rarities():
    a, b, c, d = make_item("1"), make_item("3"), make_item("1"), make_item("3")

    buckets = group_items_by_rarity([a, b, c, d])

    assert buckets == {"1": [a, c], "3": [b, d]}
    assert "2" not in buckets
    assert sum(len(items) for items in buckets.values()) == 4


def test_rarity_table_sums_to_one():
    validate_rarity_table(RARITIES)
    assert math.isclose(sum(r.chance for r in RARITIES), 1.0, abs_tol=1e-9)


@pytest.mark.parametrize(
    "table",
    [
        [],
        [RaritySchema(id="1", chance=0.5), RaritySchema(id="2", chance=0.4)],
        [RaritySchema(id="1", chance=0.5), RaritySchema(id="1", chance=0.5)],
        [RaritySchema(id="1", chance=1.2), RaritySchema(id="2", chance=-0.2)],
    ],
)
def test_validate_rarity_table_rejects_bad_tables(table):
    with pytest.raises(ValueError):
        validate_rarity_table(table)


def test_pick_rarity_uses_inclusive_cumulative_boundaries():
    engine = WeightedDrawEngine(rng=ScriptedRandom([0.0, 0.7992, 0.79921, 0.9999]))

    assert engine.pick_rarity().id == "1"
    assert engine.pick_rarity().id == "1"
    assert engine.pick_rarity().id == "2"
    assert engine.pick_rarity().id == "5"


def test_last_rarity_absorbs_floating_point_slack():
    table = [RaritySchema(id="a", chance=0.5), RaritySchema(id="b", chance=0.3)]
    engine = WeightedDrawEngine(rarities=table, rng=ScriptedRandom([0.95]))

    assert engine.pick_rarity().id == "b"
    assert effective_chances(table) == pytest.approx({"a": 0.5, "b": 0.5})


def test_draw_picks_within_the_selected_rarity():
    common = [make_item("1"), make_item("1")]
    rare = make_item("2")
    engine = WeightedDrawEngine(rng=ScriptedRandom([0.85], index=0))

    assert engine.draw(group_items_by_rarity(common + [rare])) == rare


def test_fallback_returns_an_item_present_in_the_case():
    only_legendary = [make_item("5"), make_item("5"), make_item("4")]
    buckets = group_items_by_rarity(only_legendary)
    engine = WeightedDrawEngine(rng=random.Random(7))

    for _ in range(2000):
        item = engine.draw(buckets)
        assert item is not None
        assert item in only_legendary


def test_fallback_is_uniform_over_present_rarities():
    # Rarity "1" is missing, so almost every draw falls back.
    items = [make_item("2"), make_item("5")]
    engine = WeightedDrawEngine(rng=random.Random(11))
    draws = 20_000

    counts = Counter(engine.draw(group_items_by_rarity(items)).rarity for _ in range(draws))

    probabilities = dict(
        (item.rarity, p) for item, p in engine.item_probabilities(group_items_by_rarity(items))
    )
    for rarity in ("2", "5"):
        assert counts[rarity] / draws == pytest.approx(probabilities[rarity], abs=0.015)
    # Not re-weighted by the table chances: rarity "5" gets far more than 0.26%.
    assert counts["5"] / draws > 0.3


def test_draw_from_empty_bucket_map_is_rejected():
    engine = WeightedDrawEngine(rng=random.Random(0))
    with pytest.raises(ValueError):
        engine.draw({})
    with pytest.raises(ValueError):
        engine.draw({"1": []})


def test_rarity_frequencies_converge_to_table():
    items = [make_item(rarity.id) for rarity in RARITIES for _ in range(3)]
    buckets = group_items_by_rarity(items)
    engine = WeightedDrawEngine(rng=random.Random(2024))
    draws = 200_000

    counts = Counter(engine.draw(buckets).rarity for _ in range(draws))

    for rarity in RARITIES:
        observed = counts[rarity.id] / draws
        tolerance = 5 * math.sqrt(rarity.chance * (1 - rarity.chance) / draws)
        assert abs(observed - rarity.chance) <= tolerance, rarity.id


def test_items_within_a_rarity_are_equally_likely():
    items = [make_item("1") for _ in range(4)] + [make_item("2")]
    buckets = group_items_by_rarity(items)
    engine = WeightedDrawEngine(rng=random.Random(99))
    draws = 40_000

    counts = Counter(engine.draw(buckets).item_id for _ in range(draws))

    per_common = [counts[item.item_id] / draws for item in items[:4]]
    for observed in per_common:
        assert observed == pytest.approx(sum(per_common) / 4, abs=0.01)


def test_item_probabilities_spread_missing_mass_over_present_rarities():
    common_a, common_b, rare = make_item("1"), make_item("1"), make_item("2")
    engine = WeightedDrawEngine()

    probabilities = dict(
        (item.item_id, p)
        for item, p in engine.item_probabilities(group_items_by_rarity([common_a, common_b, rare]))
    )

    missing = 0.032 + 0.0064 + 0.0026
    assert probabilities[common_a.item_id] == pytest.approx((0.7992 + missing / 2) / 2)
    assert probabilities[common_b.item_id] == pytest.approx((0.7992 + missing / 2) / 2)
    assert probabilities[rare.item_id] == pytest.approx(0.1598 + missing / 2)
    assert sum(probabilities.values()) == pytest.approx(1.0)
