"""Global rarity table.

Order matters: the draw walks the table front to back and the last entry
receives whatever probability mass the cumulative sum leaves over.
"""

from typing import List, Sequence

from lootcase.models.schema_models import RaritySchema

RARITY_SUM_TOLERANCE = 1e-6

RARITIES: List[RaritySchema] = [
    RaritySchema(id="1", chance=0.7992),
    RaritySchema(id="2", chance=0.1598),
    RaritySchema(id="3", chance=0.032),
    RaritySchema(id="4", chance=0.0064),
    RaritySchema(id="5", chance=0.0026),
]


def validate_rarity_table(rarities: Sequence[RaritySchema]) -> None:
    """Raise ValueError unless the table is non-empty, unique and sums to 1.0."""
    if not rarities:
        raise ValueError("Rarity table is empty")

    ids = [rarity.id for rarity in rarities]
    if len(set(ids)) != len(ids):
        raise ValueError(f"Duplicate rarity ids: {ids}")

    if any(rarity.chance < 0 for rarity in rarities):
        raise ValueError("Rarity chances must not be negative")

    total = sum(rarity.chance for rarity in rarities)
    if abs(total - 1.0) > RARITY_SUM_TOLERANCE:
        raise ValueError(f"Rarity chances must sum to 1.0, got {total}")


def effective_chances(rarities: Sequence[RaritySchema]) -> dict[str, float]:
    """Probability that the cumulative walk lands on each rarity.

    Boundaries are clipped to [0, 1] and the last entry extends to 1.0.
    """
    chances = {}
    lower = 0.0
    cumulative = 0.0
    for index, rarity in enumerate(rarities):
        cumulative += rarity.chance
        upper = 1.0 if index == len(rarities) - 1 else min(cumulative, 1.0)
        chances[rarity.id] = max(upper - lower, 0.0)
        lower = max(lower, upper)
    return chances


validate_rarity_table(RARITIES)
