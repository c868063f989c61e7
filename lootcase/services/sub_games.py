"""Call contracts of the upgrade and slot sub-games.

Their rules live outside this service. Implementations are plugged in by
overriding get_upgrade_game / get_slot_game.
"""

from typing import Any, Dict, List, Protocol
from uuid import UUID

from lootcase.broadcaster import OutcomeBroadcaster
from lootcase.exceptions import NotConfiguredError


class UpgradeGame(Protocol):
    async def upgrade_items(
        self, user_id: UUID, selected_item_ids: List[UUID], target_item_id: UUID
    ) -> Dict[str, Any]:
        """Return a body carrying its own HTTP status under "status"."""
        ...


class SlotGame(Protocol):
    async def spin(
        self, user_id: UUID, bet_amount: float, broadcaster: OutcomeBroadcaster
    ) -> Dict[str, Any]:
        """Return the spin result or raise with a caller-facing message."""
        ...


def get_upgrade_game() -> UpgradeGame:
    raise NotConfiguredError("Upgrade game is not configured")


def get_slot_game() -> SlotGame:
    raise NotConfiguredError("Slot game is not configured")
