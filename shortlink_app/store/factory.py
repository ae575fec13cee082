"""
Factory for creating record store instances.
"""

import logging
from enum import Enum

from shortlink_app.config import Settings, settings as default_settings
from shortlink_app.database.connection import Base, build_engine, build_session_factory
from .strategies import RecordStore, SQLRecordStore, InMemoryRecordStore

logger = logging.getLogger(__name__)


class StoreBackend(Enum):
    """Available record store backends"""
    SQL = "sql"
    MEMORY = "memory"


class StoreFactory:
    """
    Simple factory for creating record store instances.

    Returns a fresh instance per call; the application owns its lifetime.
    """

    @classmethod
    def create(cls, backend: StoreBackend, settings: Settings = None) -> RecordStore:
        """
        Create a record store.

        Args:
            backend: Type of store backend (from enum)
            settings: Settings to read connection details from

        Returns:
            RecordStore instance
        """
        settings = settings or default_settings

        if backend == StoreBackend.SQL:
            engine = build_engine(settings.database_url)
            # Import models so their tables are registered with Base
            import shortlink_app.models  # noqa: F401
            Base.metadata.create_all(bind=engine)
            logger.info("SQL record store initialized (%s)", engine.url.render_as_string())
            return SQLRecordStore(build_session_factory(engine))

        if backend == StoreBackend.MEMORY:
            logger.info("In-memory record store initialized")
            return InMemoryRecordStore()

        raise ValueError(f"Unknown store backend: {backend}")
