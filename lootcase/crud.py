from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload
from typing import List, Sequence
from uuid import UUID
import logging

from lootcase.models.schema_models import (
    CaseSchema,
    InventoryItemSchema,
    ItemSchema,
    UserSchema,
)
from lootcase.models.schemas import (
    Case,
    InventoryItem,
    Item,
    User,
    case_items,
)


class ReadData:
    @staticmethod
    async def read_case_with_items(case_id: UUID, session: AsyncSession) -> Case | None:
        """Read a case row together with its ordered items

        Args:
            case_id (UUID): To identify the case

        Returns:
            Case | None: ORM case with items loaded, None if it does not exist
        """
        stmt = (
            select(Case)
            .where(Case.case_id == case_id)
            .options(selectinload(Case.items))
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    @staticmethod
    async def read_case_data(case_id: UUID, session: AsyncSession) -> CaseSchema | None:
        case_data = await ReadData.read_case_with_items(case_id, session)
        if case_data is None:
            return None
        return CaseSchema.model_validate(case_data)

    @staticmethod
    async def read_all_cases(session: AsyncSession) -> List[CaseSchema]:
        stmt = (
            select(Case)
            .options(selectinload(Case.items))
            .order_by(Case.price, Case.name)
        )
        result = await session.execute(stmt)
        return [CaseSchema.model_validate(case_data) for case_data in result.scalars().all()]

    @staticmethod
    async def read_user_for_update(user_id: UUID, session: AsyncSession) -> User | None:
        """Read and lock the user row for the rest of the transaction

        Args:
            user_id (UUID): To identify the user

        Returns:
            User | None: ORM user, None if it does not exist
        """
        stmt = select(User).where(User.user_id == user_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalars().first()

    @staticmethod
    async def read_user_data(user_id: UUID, session: AsyncSession) -> UserSchema | None:
        result = await session.execute(select(User).where(User.user_id == user_id))
        user = result.scalars().first()
        if user is None:
            return None
        return UserSchema.model_validate(user)

    @staticmethod
    async def read_user_by_username(username: str, session: AsyncSession) -> User | None:
        result = await session.execute(select(User).where(User.username == username))
        return result.scalars().first()

    @staticmethod
    async def read_inventory(user_id: UUID, session: AsyncSession) -> List[InventoryItemSchema]:
        """Read the user's inventory, most recent first"""
        stmt = (
            select(InventoryItem)
            .where(InventoryItem.user_id == user_id)
            .options(selectinload(InventoryItem.item))
            .order_by(InventoryItem.sequence.desc())
        )
        result = await session.execute(stmt)
        return [InventoryItemSchema.model_validate(row) for row in result.scalars().all()]

    @staticmethod
    async def read_latest_inventory_sequence(user_id: UUID, session: AsyncSession) -> int:
        stmt = select(func.max(InventoryItem.sequence)).where(InventoryItem.user_id == user_id)
        latest = await session.scalar(stmt)
        return latest or 0


class CreateData:
    @staticmethod
    async def add_inventory_items(user_id: UUID, items: Sequence[Item], session: AsyncSession) -> None:
        """Prepend items to the user's inventory keeping their order

        The first item of ``items`` becomes the newest entry.

        NOTE: Does not commit; call inside session.begin().
        """
        latest = await ReadData.read_latest_inventory_sequence(user_id, session)
        count = len(items)
        session.add_all(
            [
                InventoryItem(
                    user_id=user_id,
                    item_id=item.item_id,
                    sequence=latest + count - index,
                )
                for index, item in enumerate(items)
            ]
        )

    @staticmethod
    async def create_user_data(
        username: str,
        hash_password: str,
        salt: str,
        session: AsyncSession,
        wallet_balance: float = 0.0,
        profile_picture: str | None = None,
    ) -> UserSchema | None:
        """Create a user account

        Args:
            username (str): Login name, unique
            hash_password (str): Salted and peppered password hash
            salt (str): Salt used for the hash
            wallet_balance (float, optional): Starting balance. Defaults to 0.0.
            profile_picture (str | None, optional): Avatar URL. Defaults to None.

        Returns:
            UserSchema | None: The created user, None on failure
        """
        try:
            new_user = User(
                username=username,
                hash_password=hash_password,
                salt=salt,
                wallet_balance=wallet_balance,
                profile_picture=profile_picture,
                xp=0,
                level=1,
            )
            session.add(new_user)
            await session.flush()
            user_data = UserSchema.model_validate(new_user)
            await session.commit()
            return user_data
        except Exception as e:
            await session.rollback()
            logging.error(f"Failed to create user data: {e}")
            return None

    @staticmethod
    async def create_case_data(case: CaseSchema, session: AsyncSession) -> bool:
        """Create a case and any of its items that do not exist yet

        Args:
            case (CaseSchema): Case with its ordered items

        Returns:
            bool: True on success
        """
        try:
            new_case = Case(
                case_id=case.case_id,
                name=case.name,
                image=case.image,
                price=case.price,
            )
            session.add(new_case)
            added_ids = set()
            for item in case.items:
                if item.item_id in added_ids:
                    raise ValueError(f"Item {item.item_id} is listed twice in case {case.name}")
                added_ids.add(item.item_id)
                existing = await session.get(Item, item.item_id)
                if existing is None:
                    session.add(
                        Item(
                            item_id=item.item_id,
                            name=item.name,
                            rarity=item.rarity,
                            image=item.image,
                            value=item.value,
                        )
                    )
            await session.flush()
            if case.items:
                await session.execute(
                    case_items.insert(),
                    [
                        {"case_id": case.case_id, "item_id": item.item_id, "position": position}
                        for position, item in enumerate(case.items)
                    ],
                )
            await session.commit()
            return True
        except Exception as e:
            await session.rollback()
            logging.error(f"Failed to create case data: {e}")
            return False
