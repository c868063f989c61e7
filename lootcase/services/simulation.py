import numpy as np

from lootcase.domain.draw_engine import WeightedDrawEngine, group_items_by_rarity
from lootcase.domain.rarities import effective_chances
from lootcase.models.dc_models import SimulationModel
from lootcase.models.schema_models import CaseSchema

MAX_SIMULATION_DRAWS = 100_000


def simulate_case(
    *,
    case_data: CaseSchema,
    draws: int,
    draw_engine: WeightedDrawEngine,
) -> SimulationModel:
    """Run ``draws`` independent draws against a case and tally the results.

    Nothing is persisted; expected frequencies come from the exact odds so
    the two can be compared side by side.
    """
    if draws < 1 or draws > MAX_SIMULATION_DRAWS:
        raise ValueError(f"draws must be between 1 and {MAX_SIMULATION_DRAWS}")
    if not case_data.items:
        raise ValueError("Cannot simulate a case without items")

    items_by_rarity = group_items_by_rarity(case_data.items)
    drawn = [draw_engine.draw(items_by_rarity) for _ in range(draws)]

    drawn_rarities = np.array([item.rarity for item in drawn])
    drawn_item_ids = np.array([str(item.item_id) for item in drawn])

    rarity_ids, rarity_counts = np.unique(drawn_rarities, return_counts=True)
    item_ids, item_counts = np.unique(drawn_item_ids, return_counts=True)

    expected_items = {
        str(item.item_id): probability
        for item, probability in draw_engine.item_probabilities(items_by_rarity)
    }
    expected_rarities: dict[str, float] = {}
    for item in case_data.items:
        expected_rarities[item.rarity] = (
            expected_rarities.get(item.rarity, 0.0) + expected_items[str(item.item_id)]
        )

    return SimulationModel(
        draws=draws,
        rarity_frequencies={
            str(rarity_id): float(count) / draws
            for rarity_id, count in zip(rarity_ids, rarity_counts)
        },
        expected_rarity_frequencies=expected_rarities,
        item_frequencies={
            str(item_id): float(count) / draws
            for item_id, count in zip(item_ids, item_counts)
        },
        expected_item_frequencies=expected_items,
    )


def rarity_table_odds(draw_engine: WeightedDrawEngine) -> dict[str, float]:
    """Chance of each tier before any per-case fallback"""
    return effective_chances(draw_engine.rarities)
