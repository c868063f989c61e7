"""Experience and level progression driven by currency spent."""

import math

XP_PER_CURRENCY_UNIT = 1
BASE_LEVEL_XP = 100
LEVEL_EXPONENT = 1.5


def xp_for_level(level: int) -> int:
    """Total xp needed to reach ``level``. Level 1 needs none."""
    if level <= 1:
        return 0
    return int(BASE_LEVEL_XP * (level - 1) ** LEVEL_EXPONENT)


def level_for_xp(xp: int) -> int:
    level = 1
    while xp >= xp_for_level(level + 1):
        level += 1
    return level


def update_level(user, amount_spent: float) -> None:
    """Credit xp for ``amount_spent`` and recompute the level in place.

    Levels never go down, even if the stored level is ahead of the curve.
    """
    gained = int(math.floor(amount_spent * XP_PER_CURRENCY_UNIT))
    user.xp = (user.xp or 0) + max(gained, 0)
    user.level = max(user.level or 1, level_for_xp(user.xp))
