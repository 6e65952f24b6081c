"""Database-backed site settings store."""
from __future__ import annotations

import logging
from threading import Lock

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ..db import SETTING_DESCRIPTIONS
from ..errors import NotFoundError, StorageError
from ..models import SettingRecord
from ..schemas import SettingEntryModel

logger = logging.getLogger(__name__)


class SettingsStore:
    """Thread-safe interface over the key/value settings table."""

    def __init__(self, engine) -> None:
        self._engine = engine
        self._lock = Lock()

    def read_all(self) -> dict[str, SettingEntryModel]:
        """Return every setting keyed by name."""

        try:
            with Session(self._engine) as session:
                records = session.exec(select(SettingRecord).order_by(SettingRecord.key)).all()
        except SQLAlchemyError as exc:
            logger.exception("Error fetching settings")
            raise StorageError("Error fetching settings") from exc
        return {
            record.key: SettingEntryModel(value=record.value, description=record.description)
            for record in records
        }

    def get_value(self, key: str) -> str | None:
        """Return the raw value of one setting, or None when unset."""

        try:
            with Session(self._engine) as session:
                record = session.get(SettingRecord, key)
        except SQLAlchemyError as exc:
            logger.exception("Error fetching setting %s", key)
            raise StorageError("Error fetching settings") from exc
        return record.value if record else None

    def update(self, key: str, value: str | None) -> SettingEntryModel:
        """Upsert the value of a known setting; unknown keys are rejected."""

        if key not in SETTING_DESCRIPTIONS:
            raise NotFoundError(f"Unknown setting: {key}")

        try:
            with self._lock, Session(self._engine) as session:
                record = session.get(SettingRecord, key)
                if record is None:
                    record = SettingRecord(key=key, description=SETTING_DESCRIPTIONS[key])
                record.value = value
                session.add(record)
                session.commit()
                session.refresh(record)
                return SettingEntryModel(value=record.value, description=record.description)
        except SQLAlchemyError as exc:
            logger.exception("Error updating setting %s", key)
            raise StorageError("Error updating settings") from exc
