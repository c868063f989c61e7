"""Rarity-weighted item draws.

A draw first picks a rarity tier from the global table, then an item uniformly
inside that tier, so an item's chance is ``rarity.chance / bucket size`` no
matter how many items share its rarity.
"""

import random
from typing import Dict, List, Optional, Sequence, TypeVar

from lootcase.domain.rarities import RARITIES, effective_chances
from lootcase.models.schema_models import RaritySchema

T = TypeVar("T")


def group_items_by_rarity(items: Sequence[T]) -> Dict[str, List[T]]:
    """Split a case's items into per-rarity buckets, keeping their order.

    Rarities the case has no items for are left out of the mapping.
    """
    items_by_rarity: Dict[str, List[T]] = {}
    for item in items:
        items_by_rarity.setdefault(item.rarity, []).append(item)
    return items_by_rarity


class WeightedDrawEngine:
    """Two-stage sampler over a bucket map.

    Args:
        rarities: Ordered rarity table. Its order is the tie-break rule.
        rng: Random source. Each engine owns its own so tests can seed it.
    """

    def __init__(
        self,
        rarities: Sequence[RaritySchema] = RARITIES,
        rng: Optional[random.Random] = None,
    ):
        self.rarities = list(rarities)
        self.rng = rng if rng is not None else random.Random()

    def pick_rarity(self) -> RaritySchema:
        random_number = self.rng.random()
        cumulative = 0.0
        for rarity in self.rarities:
            cumulative += rarity.chance
            if random_number <= cumulative:
                return rarity
        # Floating-point slack below 1.0 lands on the last tier.
        return self.rarities[-1]

    def pick_item(self, items_by_rarity: Dict[str, List[T]], rarity_id: str) -> Optional[T]:
        items = items_by_rarity.get(rarity_id)
        if not items:
            return None
        return items[self.rng.randrange(len(items))]

    def draw(self, items_by_rarity: Dict[str, List[T]]) -> T:
        """Draw one item from a bucket map built by group_items_by_rarity.

        Raises:
            ValueError: The bucket map holds no items at all.
        """
        existing_rarities = [rarity_id for rarity_id, items in items_by_rarity.items() if items]
        if not existing_rarities:
            raise ValueError("Cannot draw from a case without items")

        winning_rarity = self.pick_rarity()
        winning_item = self.pick_item(items_by_rarity, winning_rarity.id)
        if winning_item is None:
            # The case has nothing of that rarity: any present rarity, equally likely.
            fallback_rarity = existing_rarities[self.rng.randrange(len(existing_rarities))]
            winning_item = self.pick_item(items_by_rarity, fallback_rarity)
        return winning_item

    def item_probabilities(self, items_by_rarity: Dict[str, List[T]]) -> List[tuple[T, float]]:
        """Exact per-item drop probability for the given bucket map.

        Mass of rarities missing from the case is spread evenly over the
        rarities that are present, mirroring the fallback in draw().
        """
        chances = effective_chances(self.rarities)
        existing_rarities = [rarity_id for rarity_id, items in items_by_rarity.items() if items]
        if not existing_rarities:
            return []

        missing_mass = sum(
            chance for rarity_id, chance in chances.items() if rarity_id not in existing_rarities
        )
        # Items whose rarity is not in the table are only reachable through the fallback.
        fallback_share = missing_mass / len(existing_rarities)

        probabilities = []
        for rarity_id in existing_rarities:
            items = items_by_rarity[rarity_id]
            tier_chance = chances.get(rarity_id, 0.0) + fallback_share
            for item in items:
                probabilities.append((item, tier_chance / len(items)))
        return probabilities
