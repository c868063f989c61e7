import argparse
from fastapi import Depends, status, HTTPException
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from sqlalchemy.ext.asyncio import async_sessionmaker
import secrets
import hashlib
import asyncio
import logging

from lootcase.crud import CreateData, ReadData
from lootcase.db import Session, engine
from lootcase.models.schema_models import UserSchema
from lootcase.models.schemas import Base
from lootcase.load_secrets import pepper_data

security = HTTPBasic()


def hash_password(password: str, salt: str) -> str:
    return hashlib.sha256((password + salt + pepper_data).encode()).hexdigest()


class BasicAuthentication:
    def __init__(self, Session: async_sessionmaker = Session):
        self.Session: async_sessionmaker = Session

    async def check_user_data(
        self, credentials: HTTPBasicCredentials = Depends(security)
    ) -> UserSchema:
        """Resolve the player behind the Basic credentials

        Args:
            credentials (HTTPBasicCredentials, optional): _description_. Defaults to Depends(security).

        Raises:
            HTTPException: The username is unknown
            HTTPException: The password is incorrect

        Returns:
            UserSchema: The authenticated user
        """
        async with self.Session() as session:
            user = await ReadData.read_user_by_username(credentials.username, session)
            if user is None:
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Invalid username",
                    headers={"WWW-Authenticate": "Basic"},
                )

            hashed_password = hash_password(credentials.password, user.salt)
            if not secrets.compare_digest(hashed_password, user.hash_password):
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Invalid password",
                    headers={"WWW-Authenticate": "Basic"},
                )
            return UserSchema.model_validate(user)

    async def store_user_data(
        self,
        user_name: str,
        password: str,
        wallet_balance: float = 0.0,
        profile_picture: str | None = None,
    ) -> UserSchema | None:
        salt = secrets.token_hex(8)
        async with self.Session() as session:
            return await CreateData.create_user_data(
                user_name,
                hash_password(password, salt),
                salt,
                session,
                wallet_balance=wallet_balance,
                profile_picture=profile_picture,
            )


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a player account")
    parser.add_argument("--username", type=str, help="Username", required=True)
    parser.add_argument("--password", type=str, help="Password", required=True)
    parser.add_argument("--balance", type=float, default=0.0, help="Starting wallet balance")
    parser.add_argument("--picture", type=str, default=None, help="Profile picture URL")
    return parser


async def main(user_name: str, password: str, balance: float, picture: str | None):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    basic_auth = BasicAuthentication()
    user_data = await basic_auth.store_user_data(user_name, password, balance, picture)
    if user_data is None:
        logging.error(f"Could not create user {user_name}")
        return
    print(user_data.user_id, user_data.username, user_data.wallet_balance)


if __name__ == "__main__":
    parser = get_parser()
    args = parser.parse_args()
    asyncio.run(main(args.username, args.password, args.balance, args.picture))
