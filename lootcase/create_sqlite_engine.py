import pathlib

from sqlalchemy.ext.asyncio import create_async_engine

from lootcase.load_secrets import sqlite_path

file_path = pathlib.Path(sqlite_path)
if not file_path.is_absolute():
    file_path = pathlib.Path(__file__).parents[1] / file_path
sqlite_url = f"sqlite+aiosqlite:///{file_path}"


engine = create_async_engine(url=sqlite_url, echo=False)
