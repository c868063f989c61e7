from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from lootcase.converter import DataConverter
from lootcase.crud import ReadData
from lootcase.domain.draw_engine import WeightedDrawEngine, group_items_by_rarity
from lootcase.exceptions import CaseNotFoundError, EmptyCaseError, UserNotFoundError
from lootcase.models.dc_models import (
    CaseDetailModel,
    ItemOddsModel,
    SimulationModel,
    UserProfileModel,
)
from lootcase.models.schema_models import (
    CaseSchema,
    InventoryItemSchema,
    RaritySchema,
    UserSchema,
)
from lootcase.routers.games import basic_auth
from lootcase.db import Session
from lootcase.services.simulation import (
    MAX_SIMULATION_DRAWS,
    rarity_table_odds,
    simulate_case,
)

rest_router = APIRouter()
data_converter = DataConverter()


def get_session_factory():
    return Session


def get_draw_engine() -> WeightedDrawEngine:
    # A fresh engine per request keeps simulations off the settlement's random source.
    return WeightedDrawEngine()


class RarityAPI:
    @staticmethod
    @rest_router.get("/rarities", response_model=List[RaritySchema])
    async def get_rarities(draw_engine: WeightedDrawEngine = Depends(get_draw_engine)):
        odds = rarity_table_odds(draw_engine)
        return [RaritySchema(id=rarity_id, chance=chance) for rarity_id, chance in odds.items()]


class CaseAPI:
    @staticmethod
    @rest_router.get("/cases", response_model=List[CaseSchema])
    async def get_cases(Session=Depends(get_session_factory)):
        async with Session() as session:
            return await ReadData.read_all_cases(session)

    @staticmethod
    @rest_router.get("/cases/{case_id}", response_model=CaseDetailModel)
    async def get_case(
        case_id: UUID,
        Session=Depends(get_session_factory),
        draw_engine: WeightedDrawEngine = Depends(get_draw_engine),
    ):
        async with Session() as session:
            case_data = await ReadData.read_case_data(case_id, session)
        if case_data is None:
            raise CaseNotFoundError("Case not found")

        probabilities = draw_engine.item_probabilities(group_items_by_rarity(case_data.items))
        return CaseDetailModel(
            case_id=case_data.case_id,
            name=case_data.name,
            image=case_data.image,
            price=case_data.price,
            items=[ItemOddsModel(item=item, probability=p) for item, p in probabilities],
        )

    @staticmethod
    @rest_router.get("/cases/{case_id}/simulate", response_model=SimulationModel)
    async def simulate(
        case_id: UUID,
        draws: int = Query(10_000, ge=1, le=MAX_SIMULATION_DRAWS),
        Session=Depends(get_session_factory),
        draw_engine: WeightedDrawEngine = Depends(get_draw_engine),
    ):
        async with Session() as session:
            case_data = await ReadData.read_case_data(case_id, session)
        if case_data is None:
            raise CaseNotFoundError("Case not found")
        if not case_data.items:
            raise EmptyCaseError("This case has no items to simulate")
        return simulate_case(case_data=case_data, draws=draws, draw_engine=draw_engine)


class UserAPI:
    @staticmethod
    @rest_router.get("/users/me", response_model=UserProfileModel)
    async def get_me(
        user_data: UserSchema = Depends(basic_auth.check_user_data),
        Session=Depends(get_session_factory),
    ):
        async with Session() as session:
            latest = await ReadData.read_user_data(user_data.user_id, session)
        if latest is None:
            raise UserNotFoundError("User not found")
        return data_converter.convert_userschema_to_profile(latest)

    @staticmethod
    @rest_router.get("/users/me/inventory", response_model=List[InventoryItemSchema])
    async def get_inventory(
        user_data: UserSchema = Depends(basic_auth.check_user_data),
        Session=Depends(get_session_factory),
    ):
        async with Session() as session:
            return await ReadData.read_inventory(user_data.user_id, session)
