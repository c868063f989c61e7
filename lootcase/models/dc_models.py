from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional
from uuid import UUID

from lootcase.models.schema_models import CaseSchema, ItemSchema, UserSchema


class OpenCaseModel(BaseModel):
    # Left untyped so the settlement layer classifies bad quantities itself.
    quantity: Any = None


class OpenCaseResponseModel(BaseModel):
    items: List[ItemSchema]


class OpenCaseResult(BaseModel):
    """Outcome of one settled opening, kept server side for the broadcaster."""
    items: List[ItemSchema]
    user: UserSchema
    case: CaseSchema


class UpgradeModel(BaseModel):
    selected_item_ids: List[UUID]
    target_item_id: UUID


class SlotSpinModel(BaseModel):
    bet_amount: float


class WinnerUserModel(BaseModel):
    name: str
    id: UUID
    profile_picture: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class CaseOpenedEventModel(BaseModel):
    winning_items: List[ItemSchema]
    user: WinnerUserModel
    case_image: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class UserDataUpdatedEventModel(BaseModel):
    wallet_balance: float
    xp: int
    level: int

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ItemOddsModel(BaseModel):
    item: ItemSchema
    probability: float


class CaseDetailModel(BaseModel):
    case_id: UUID
    name: str
    image: Optional[str] = None
    price: float
    items: List[ItemOddsModel]


class UserProfileModel(BaseModel):
    user_id: UUID
    username: str
    profile_picture: Optional[str] = None
    wallet_balance: float
    xp: int
    level: int
    xp_for_next_level: int


class SimulationModel(BaseModel):
    draws: int
    rarity_frequencies: Dict[str, float]
    expected_rarity_frequencies: Dict[str, float]
    item_frequencies: Dict[str, float]
    expected_item_frequencies: Dict[str, float]
