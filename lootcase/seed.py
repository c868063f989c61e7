"""Load items and cases from a JSON file.

Format::

    {
      "items": [{"name": "AK | Redline", "rarity": "2", "image": "...", "value": 12.5}],
      "cases": [{"name": "Starter", "image": "...", "price": 50, "items": ["AK | Redline"]}]
    }

Cases refer to items by name, so one item definition can sit in several cases.
"""

import argparse
import asyncio
import json
import logging
import pathlib
from typing import Any, Dict, List

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import async_sessionmaker
from uuid6 import uuid7

from lootcase.crud import CreateData
from lootcase.db import Session, engine
from lootcase.domain.rarities import RARITIES
from lootcase.models.schema_models import CaseSchema, ItemSchema
from lootcase.models.schemas import Base


class SeedItemModel(BaseModel):
    name: str
    rarity: str
    image: str | None = None
    value: float = 0.0


class SeedCaseModel(BaseModel):
    name: str
    image: str | None = None
    price: float
    items: List[str]


class SeedFileModel(BaseModel):
    items: List[SeedItemModel]
    cases: List[SeedCaseModel]


def build_cases(seed_data: Dict[str, Any]) -> List[CaseSchema]:
    """Resolve item names and assign ids

    Raises:
        ValueError: Unknown rarity, duplicate item name or unknown item in a case
    """
    seed = SeedFileModel.model_validate(seed_data)
    known_rarities = {rarity.id for rarity in RARITIES}

    items_by_name: Dict[str, ItemSchema] = {}
    for item in seed.items:
        if item.rarity not in known_rarities:
            raise ValueError(f"Item {item.name} has unknown rarity {item.rarity}")
        if item.name in items_by_name:
            raise ValueError(f"Duplicate item name {item.name}")
        items_by_name[item.name] = ItemSchema(item_id=uuid7(), **item.model_dump())

    cases = []
    for case in seed.cases:
        missing = [name for name in case.items if name not in items_by_name]
        if missing:
            raise ValueError(f"Case {case.name} refers to unknown items: {missing}")
        cases.append(
            CaseSchema(
                case_id=uuid7(),
                name=case.name,
                image=case.image,
                price=case.price,
                items=[items_by_name[name] for name in case.items],
            )
        )
    return cases


async def seed_cases(cases: List[CaseSchema], Session: async_sessionmaker) -> int:
    created = 0
    for case in cases:
        async with Session() as session:
            if await CreateData.create_case_data(case, session):
                created += 1
                logging.info(f"Created case {case.name} ({case.case_id}) with {len(case.items)} items")
    return created


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Seed items and cases")
    parser.add_argument("file", type=pathlib.Path, help="JSON seed file")
    return parser


async def main(file: pathlib.Path):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    cases = build_cases(json.loads(file.read_text(encoding="utf-8")))
    created = await seed_cases(cases, Session)
    print(f"{created}/{len(cases)} cases created")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    args = get_parser().parse_args()
    asyncio.run(main(args.file))
