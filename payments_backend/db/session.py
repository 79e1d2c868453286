import logging
import ssl
from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from payments_backend.core.config import Settings
from payments_backend.db.base import Base
import payments_backend.db.models  # noqa: F401  registers tables on Base.metadata

logger = logging.getLogger(__name__)


def normalize_database_url(database_url: str) -> URL:
    """
    Hosted postgres providers hand out postgres:// urls, sometimes with a
    libpq sslmode parameter. Point them at asyncpg and drop sslmode, TLS is
    configured through connect_args instead.
    """
    url = make_url(database_url)
    if url.drivername in ("postgres", "postgresql", "postgresql+psycopg2"):
        url = url.set(drivername="postgresql+asyncpg")
    if url.drivername.startswith("postgresql"):
        url = url.difference_update_query(["sslmode"])
    return url


def relaxed_ssl_context() -> ssl.SSLContext:
    # TLS on, certificate not verified
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def build_engine(settings: Settings) -> AsyncEngine:
    url = normalize_database_url(settings.DATABASE_URL)
    options = {"echo": False, "future": True}
    if url.drivername.startswith("postgresql"):
        connect_args = {"timeout": settings.DATABASE_TIMEOUT}
        if settings.DATABASE_SSL:
            connect_args["ssl"] = relaxed_ssl_context()
        options.update(
            connect_args=connect_args,
            # Pool settings
            pool_size=10,
            max_overflow=20,
            pool_timeout=settings.DATABASE_TIMEOUT,
            pool_recycle=3600,
            pool_pre_ping=True
        )
    return create_async_engine(url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False
    )


async def init_db(engine: AsyncEngine):
    """
    Create the payments table if it does not exist.
    There is no migration tooling, this only runs in development.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("created all tables")
