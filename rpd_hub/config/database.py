import contextlib
import logging
from collections.abc import AsyncIterator
from pathlib import Path

from alembic import command, config
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from rpd_hub.config.settings import settings

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]
ALEMBIC_INI = PROJECT_ROOT / "alembic.ini"


def create_engine(url: str) -> AsyncEngine:
    url = str(url)
    use_echo = settings.LOG_DB
    connect_args = {}
    if "sqlite" in url:
        connect_args = {"timeout": 15}
    return create_async_engine(
        url,
        echo=use_echo,
        connect_args=connect_args,
    )


engine = create_engine(settings.database_url)

async_session_maker = async_sessionmaker(engine, expire_on_commit=False)


def alembic_config() -> config.Config:
    return config.Config(str(ALEMBIC_INI))


def run_upgrade(connection, cfg: config.Config) -> None:
    cfg.attributes["connection"] = connection
    command.upgrade(cfg, "head")


async def run_migrations(target_engine: AsyncEngine | None = None) -> None:
    """Bring the store up to the latest schema revision.

    Safe to call on every start: revisions already applied are skipped and each
    revision probes for its tables/columns before altering anything.
    """
    target_engine = target_engine or engine
    logger.info(f"Running schema migrations on {target_engine.url.render_as_string()}")
    async with target_engine.begin() as conn:
        await conn.run_sync(run_upgrade, alembic_config())


@contextlib.asynccontextmanager
async def async_session_manager(
    auto_commit=True, session_overwrite: AsyncSession | None = None
) -> AsyncIterator[AsyncSession]:
    if session_overwrite:
        yield session_overwrite
    else:
        async with async_session_maker() as session:
            try:
                yield session
            except Exception as e:
                await session.rollback()
                raise e
            else:
                if auto_commit:
                    await session.commit()
