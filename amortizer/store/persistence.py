"""Key-value storage of application state snapshots on top of SQLAlchemy."""

import logging

from pydantic import ValidationError
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from amortizer.config import settings
from amortizer.models.db import Base, StoredState
from amortizer.store.schemas import StateSnapshot

logger = logging.getLogger(__name__)


class StateRepository:
    """Saves and restores ``StateSnapshot`` blobs verbatim, keyed by name."""

    def __init__(self, database_url: str | None = None):
        self.engine = create_engine(database_url or settings.database_url, echo=settings.debug)
        Base.metadata.create_all(self.engine)
        self._session = sessionmaker(self.engine, expire_on_commit=False)

    def close(self) -> None:
        self.engine.dispose()

    def save(self, snapshot: StateSnapshot, key: str | None = None) -> None:
        key = key or settings.storage_key
        payload = snapshot.model_dump(mode="json")
        with self._session() as session:
            record = session.get(StoredState, key)
            if record is None:
                session.add(StoredState(key=key, payload=payload))
            else:
                record.payload = payload
            session.commit()
        logger.debug("Saved state %s (%d scenarios)", key, len(snapshot.scenarios))

    def load(self, key: str | None = None) -> StateSnapshot | None:
        """Return the stored snapshot, or None if missing or malformed."""
        key = key or settings.storage_key
        with self._session() as session:
            record = session.get(StoredState, key)
            if record is None:
                return None
            payload = record.payload

        try:
            return StateSnapshot.model_validate(payload)
        except ValidationError as e:
            logger.warning("Discarding malformed stored state %s: %s", key, e)
            return None

    def delete(self, key: str | None = None) -> bool:
        key = key or settings.storage_key
        with self._session() as session:
            record = session.get(StoredState, key)
            if record is None:
                return False
            session.delete(record)
            session.commit()
        return True
