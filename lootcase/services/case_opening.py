"""Settlement of case openings.

- Routers call this module; it owns the session/transaction boundary.
- Every check runs before the first mutation, and the debit, xp update and
  inventory insert are committed together or not at all.
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import async_sessionmaker

from lootcase.crud import CreateData, ReadData
from lootcase.domain.draw_engine import WeightedDrawEngine, group_items_by_rarity
from lootcase.domain.leveling import update_level
from lootcase.domain.opening_rules import (
    check_exists,
    check_funds,
    check_has_items,
    normalize_quantity,
    round_money,
)
from lootcase.load_secrets import max_open_quantity
from lootcase.models.dc_models import OpenCaseResult
from lootcase.models.schema_models import CaseSchema, ItemSchema, UserSchema
from lootcase.user_lock_manager import UserLockManager


class CaseOpener:
    def __init__(
        self,
        Session: async_sessionmaker,
        draw_engine: WeightedDrawEngine | None = None,
        lock_manager: UserLockManager | None = None,
        max_quantity: int = max_open_quantity,
    ):
        self.Session: async_sessionmaker = Session
        self.draw_engine = draw_engine if draw_engine is not None else WeightedDrawEngine()
        self.lock_manager = lock_manager if lock_manager is not None else UserLockManager()
        self.max_quantity = max_quantity

    async def open_cases(self, user_id: UUID, case_id: UUID, quantity: Any) -> OpenCaseResult:
        """Open ``quantity`` cases for the user in one transaction

        Args:
            user_id (UUID): The authenticated user
            case_id (UUID): The case to open
            quantity (Any): Requested number of cases, validated here

        Raises:
            CaseNotFoundError / UserNotFoundError: Case or user missing
            EmptyCaseError: The case has no items
            InvalidQuantityError: Not an integer, above the cap or below 1
            InsufficientFundsError: Balance short of price * quantity

        Returns:
            OpenCaseResult: Drawn items in draw order, the updated user and the case
        """
        async with self.lock_manager.hold(user_id):
            async with self.Session() as session:
                async with session.begin():
                    case_data = await ReadData.read_case_with_items(case_id, session)
                    user = await ReadData.read_user_for_update(user_id, session)

                    check_exists(case_data, user)
                    check_has_items(case_data)
                    quantity = normalize_quantity(quantity, self.max_quantity)
                    cost = check_funds(user.wallet_balance, case_data.price, quantity)

                    items_by_rarity = group_items_by_rarity(case_data.items)
                    winning_items = [
                        self.draw_engine.draw(items_by_rarity) for _ in range(quantity)
                    ]

                    await CreateData.add_inventory_items(user.user_id, winning_items, session)
                    user.wallet_balance = round_money(user.wallet_balance - cost)
                    update_level(user, cost)
                    await session.flush()

                    # Snapshot before commit so nothing is read from expired rows.
                    result = OpenCaseResult(
                        items=[ItemSchema.model_validate(item) for item in winning_items],
                        user=UserSchema.model_validate(user),
                        case=CaseSchema.model_validate(case_data),
                    )

        logging.info(
            f"User {user_id} opened {quantity}x case {case_id} for {cost}, "
            f"balance now {result.user.wallet_balance}"
        )
        return result
