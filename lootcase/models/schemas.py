from sqlalchemy import ForeignKey, Table, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, relationship
from sqlalchemy.schema import Column
from sqlalchemy.types import Integer, String, Uuid, Float, DateTime
from uuid6 import uuid7
from datetime import datetime


class Base(DeclarativeBase):
    pass


# An item definition may belong to several cases; position keeps the case's item order.
case_items = Table(
    "case_items",
    Base.metadata,
    Column("case_id", Uuid, ForeignKey("cases.case_id", ondelete="CASCADE"), primary_key=True),
    Column("item_id", Uuid, ForeignKey("items.item_id", ondelete="CASCADE"), primary_key=True),
    Column("position", Integer, default=0),
)


class Item(Base):
    __tablename__ = "items"
    item_id = Column(Uuid, primary_key=True, default=uuid7)
    name = Column(String, nullable=False)
    rarity = Column(String, nullable=False, index=True)
    image = Column(String)
    value = Column(Float, default=0.0)

    cases = relationship(
        "Case",
        secondary=case_items,
        back_populates="items",
    )


class Case(Base):
    __tablename__ = "cases"
    case_id = Column(Uuid, primary_key=True, default=uuid7)
    name = Column(String, nullable=False)
    image = Column(String)
    price = Column(Float, nullable=False)
    created_at = Column(DateTime, default=datetime.now)

    items = relationship(
        "Item",
        secondary=case_items,
        back_populates="cases",
        order_by=case_items.c.position,
    )


class User(Base):
    __tablename__ = "users"
    user_id = Column(Uuid, primary_key=True, default=uuid7)
    username = Column(String, unique=True, index=True, nullable=False)
    hash_password = Column(String)
    salt = Column(String)
    profile_picture = Column(String)
    wallet_balance = Column(Float, default=0.0, nullable=False)
    xp = Column(Integer, default=0, nullable=False)
    level = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime, default=datetime.now)

    inventory = relationship(
        "InventoryItem",
        back_populates="user",
        cascade="all, delete",
        order_by="InventoryItem.sequence.desc()",
    )


class InventoryItem(Base):
    __tablename__ = "inventory_items"
    __table_args__ = (UniqueConstraint("user_id", "sequence"),)
    inventory_id = Column(Uuid, primary_key=True, default=uuid7)
    user_id = Column(Uuid, ForeignKey("users.user_id", ondelete="CASCADE"), index=True)
    item_id = Column(Uuid, ForeignKey("items.item_id"))
    # Higher sequence means more recent; inventory is read in descending order.
    sequence = Column(Integer, nullable=False)
    acquired_at = Column(DateTime, default=datetime.now)

    user = relationship("User", back_populates="inventory")
    item = relationship("Item")
