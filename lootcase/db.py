from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from lootcase.load_secrets import host

# Local runs without DB_HOST fall back to a SQLite file.
if host:
    from lootcase.create_postgres_engine import engine
else:
    from lootcase.create_sqlite_engine import engine

# Centralized session factory to avoid creating it in router modules.
Session = async_sessionmaker(
    autocommit=False,
    class_=AsyncSession,
    autoflush=True,
    expire_on_commit=False,
    bind=engine,
)
