"""
Connexion a la base de donnees / Database connection.
Supporte SQLite (dev) et PostgreSQL (prod) via SQLAlchemy 2.0 async.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class RecordStore:
    """Stockage des enregistrements gasoil / Diesel record store.

    Construit une seule fois au demarrage puis injecte dans le service.
    Built once at startup and injected into the service layer.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.is_sqlite = url.startswith("sqlite")

        # Configuration moteur / Engine configuration
        engine_kwargs: dict = {"echo": echo}
        # PostgreSQL : pool borne / PostgreSQL: bounded connection pool
        if not self.is_sqlite:
            engine_kwargs.update({
                "pool_size": 5,
                "max_overflow": 10,
                "pool_timeout": 30,
                "pool_recycle": 1800,
                "pool_pre_ping": True,
            })

        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self._sessionmaker = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)

    @property
    def display_url(self) -> str:
        """URL sans mot de passe pour les logs / URL with password masked for logs."""
        return make_url(self.url).render_as_string(hide_password=True)

    async def init(self) -> None:
        """Creer les tables si absentes / Create tables if absent (idempotent)."""
        # Enregistrer les modeles sur Base.metadata / Register models on Base.metadata
        from diesel_log import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database ready at %s", self.display_url)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Session transactionnelle / Transactional session.

        Commit en sortie normale, rollback sur exception, fermeture toujours.
        """
        async with self._sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def dispose(self) -> None:
        """Fermer le pool / Release the connection pool."""
        await self.engine.dispose()
