from pydantic import BaseModel
from typing import List, Optional
from uuid import UUID
from datetime import datetime


class RaritySchema(BaseModel):
    id: str
    chance: float

    class Config:
        frozen = True


class ItemSchema(BaseModel):
    item_id: UUID
    name: str
    rarity: str
    image: Optional[str] = None
    value: float = 0.0

    class Config:
        from_attributes = True


class CaseSchema(BaseModel):
    case_id: UUID
    name: str
    image: Optional[str] = None
    price: float
    items: List[ItemSchema] = []

    class Config:
        from_attributes = True


class UserSchema(BaseModel):
    user_id: UUID
    username: str
    profile_picture: Optional[str] = None
    wallet_balance: float
    xp: int
    level: int

    class Config:
        from_attributes = True


class InventoryItemSchema(BaseModel):
    inventory_id: UUID
    sequence: int
    acquired_at: datetime
    item: ItemSchema

    class Config:
        from_attributes = True
