import logging
from typing import Dict
from typing import Optional

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
    AsyncEngine,
)

import settings
from testnetfaucet import api_logger

DEFAULT_POOL_SIZE = 100
DEFAULT_POOL_OVERFLOW = 0
DEFAULT_POOL_TIMEOUT = 1


class SessionProvider:
    def __init__(
        self,
        engine: AsyncEngine = None,
        session_maker: async_sessionmaker = None,
        logger: logging.Logger = None,
    ):
        self.engine = engine
        self.session_maker = session_maker
        self.logger = logger

    @classmethod
    def start_connection(
        cls,
        logger: logging.Logger,
        url: str,
        pool_size: int = DEFAULT_POOL_SIZE,
        pool_overflow: int = DEFAULT_POOL_OVERFLOW,
        pool_timeout: int = DEFAULT_POOL_TIMEOUT,
    ) -> "SessionProvider":
        logger.info("connection.py - creating new engine and session maker")
        engine_options = {}
        if url.startswith("postgresql"):
            engine_options = {
                "max_overflow": pool_overflow,
                "pool_timeout": pool_timeout,
                "pool_size": pool_size,
                "pool_recycle": 1800,
            }
        try:
            engine = create_async_engine(url, **engine_options)
            session_maker = async_sessionmaker(bind=engine, expire_on_commit=False)
            return cls(engine=engine, session_maker=session_maker, logger=logger)
        except Exception as e:
            logger.error(f"Failed to create engine and session maker: {e}")
            raise

    def get(self) -> AsyncSession:
        if not self.session_maker:
            raise Exception("Session provider not initialized")  # pylint: disable=broad-exception-raised
        return self.session_maker()

    async def close(self):
        if self.engine:
            await self.engine.dispose()


def postgres_url(user: str, password: str, db: str, host: str, port: str) -> str:
    return f"postgresql+psycopg_async://{user}:{password}@{host}:{port}/{db}"


# Read-write and read-only session providers, shared across the application
_session_providers: Dict[str, Optional[SessionProvider]] = {
    "write": None,
    "read": None,
}


def init_defaults():
    write_url = settings.DB_URL or postgres_url(
        settings.DB_USER,
        settings.DB_PASSWORD,
        settings.DB_DATABASE,
        settings.DB_HOST,
        settings.DB_PORT,
    )
    read_url = settings.DB_URL_READ or settings.DB_URL or postgres_url(
        settings.DB_USER_READ,
        settings.DB_PASSWORD_READ,
        settings.DB_DATABASE_READ,
        settings.DB_HOST_READ,
        settings.DB_PORT_READ,
    )
    _session_providers["write"] = SessionProvider.start_connection(
        logger=api_logger.get(), url=write_url
    )
    _session_providers["read"] = SessionProvider.start_connection(
        logger=api_logger.get(), url=read_url
    )


def get_session_provider() -> SessionProvider:
    return _session_providers["write"]


def get_session_provider_read() -> SessionProvider:
    return _session_providers["read"]


async def close_all():
    for key, session_provider in _session_providers.items():
        if session_provider:
            await session_provider.close()
        _session_providers[key] = None
