import random

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from uuid6 import uuid7

from lootcase.crud import CreateData
from lootcase.domain.draw_engine import WeightedDrawEngine
from lootcase.models.schema_models import CaseSchema, ItemSchema
from lootcase.models.schemas import Base
from lootcase.services.case_opening import CaseOpener


def make_item(rarity: str, name: str | None = None, value: float = 1.0) -> ItemSchema:
    item_id = uuid7()
    return ItemSchema(
        item_id=item_id,
        name=name or f"item-{rarity}-{item_id.hex[-6:]}",
        rarity=rarity,
        image=f"https://img.example/{item_id.hex}.png",
        value=value,
    )


def make_case(items: list[ItemSchema], price: float = 50.0, name: str = "Starter") -> CaseSchema:
    return CaseSchema(
        case_id=uuid7(),
        name=name,
        image="https://img.example/case.png",
        price=price,
        items=items,
    )


@pytest.fixture
async def Session(tmp_path):
    # NullPool: every checkout opens a fresh aiosqlite connection on the running loop.
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.sqlite3'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(autocommit=False, class_=AsyncSession, expire_on_commit=False, bind=engine)
    await engine.dispose()


@pytest.fixture
def case_data() -> CaseSchema:
    return make_case([make_item("1"), make_item("1"), make_item("2"), make_item("3")])


@pytest.fixture
async def stored_case(Session, case_data) -> CaseSchema:
    async with Session() as session:
        assert await CreateData.create_case_data(case_data, session)
    return case_data


async def create_user(Session, username: str = "player", wallet_balance: float = 100.0):
    async with Session() as session:
        user = await CreateData.create_user_data(
            username,
            "hash",
            "salt",
            session,
            wallet_balance=wallet_balance,
            profile_picture="https://img.example/avatar.png",
        )
    assert user is not None
    return user


@pytest.fixture
async def user(Session):
    return await create_user(Session)


@pytest.fixture
def case_opener(Session) -> CaseOpener:
    return CaseOpener(Session, draw_engine=WeightedDrawEngine(rng=random.Random(1234)))
