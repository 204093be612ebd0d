"""
Import and export of the web client's local-storage blob.

The blob holds every medication and dose entry the browser ever saved, keyed
by client-generated string ids. Importing creates fresh medications for the
signed-in user and remaps those ids; exporting produces the same shape back.
"""

import logging
from datetime import date
from typing import Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from models.dose_event import DoseStatus
from repositories.dose_event import DoseEventRepository
from repositories.medication import MedicationRepository
from schemas.data_exchange import (
    ImportResult,
    LegacyDoseEntry,
    LegacyMedication,
    UserDataBlob,
)
from schemas.medication import MedicationCreate

logger = logging.getLogger(__name__)


class DataExchangeService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.medication_repo = MedicationRepository(db)
        self.dose_repo = DoseEventRepository(db)

    async def export_user_data(self, user_id: int) -> UserDataBlob:
        medications = await self.medication_repo.get_by_user_id(user_id)
        events = await self.dose_repo.get_by_user_id(user_id)

        blob = UserDataBlob(
            medications=[
                LegacyMedication(
                    id=str(med.id),
                    name=med.name,
                    dosage=med.dosage,
                    unit=med.unit.value,
                    times=list(med.times),
                    start_date=med.start_date,
                    end_date=med.end_date,
                    instructions=med.instructions,
                    condition=med.condition,
                    prescribed_by=med.prescribed_by,
                )
                for med in medications
            ],
            dose_history=[
                LegacyDoseEntry(
                    medication_id=str(event.medication_id),
                    scheduled_time=event.scheduled_time,
                    taken_at=event.taken_at,
                    date=event.date,
                    status=event.status.value,
                )
                for event in events
            ],
        )
        logger.info(
            f"Exported {len(blob.medications)} medications and {len(blob.dose_history)} doses for user {user_id}"
        )
        return blob

    def _to_create(self, legacy: LegacyMedication) -> MedicationCreate:
        if legacy.start_date is None:
            raise ValueError("Start date is required")
        return MedicationCreate(
            name=legacy.name,
            dosage=legacy.dosage,
            unit=legacy.unit,
            times=legacy.times,
            start_date=legacy.start_date,
            end_date=legacy.end_date,
            instructions=legacy.instructions,
            condition=legacy.condition,
            prescribed_by=legacy.prescribed_by,
        )

    async def import_user_data(self, user_id: int, blob: UserDataBlob) -> ImportResult:
        """
        Load a local-storage blob into the user's account.

        Medications that fail validation are skipped, and so are dose entries
        that reference a skipped or unknown medication, a time the medication
        does not have, or carry no date or an unknown status. Entries for the
        same slot collapse into one event, with a taken entry winning over a
        missed one. Everything is written in a single transaction.

        Args:
            user_id: ID of the importing user
            blob: Parsed local-storage contents

        Returns:
            Counts of imported and skipped records

        Raises:
            SQLAlchemyError: If writing fails; nothing is stored in that case
        """
        result = ImportResult()

        legacy_ids: List[str] = []
        to_create: List[MedicationCreate] = []
        for legacy in blob.medications:
            try:
                to_create.append(self._to_create(legacy))
                legacy_ids.append(legacy.id)
            except ValueError as e:
                result.medications_skipped += 1
                logger.warning(f"Skipping medication '{legacy.name}' during import: {e}")

        slots: Dict[Tuple[int, str, date], Tuple[LegacyDoseEntry, DoseStatus]] = {}
        try:
            created = (
                await self.medication_repo.create_bulk(user_id, to_create, commit=False)
                if to_create else []
            )
            id_map = {legacy_id: med for legacy_id, med in zip(legacy_ids, created)}
            result.medications_imported = len(created)

            for entry in blob.dose_history:
                med = id_map.get(entry.medication_id)
                status = self._status(entry)
                if med is None or entry.date is None or status is None:
                    continue
                if entry.scheduled_time not in med.times:
                    continue
                key = (med.id, entry.scheduled_time, entry.date)
                previous = slots.get(key)
                if previous is not None and previous[1] == DoseStatus.TAKEN:
                    continue
                slots[key] = (entry, status)

            for (medication_id, scheduled_time, day), (entry, status) in slots.items():
                await self.dose_repo.upsert(
                    user_id,
                    medication_id,
                    scheduled_time,
                    day,
                    status,
                    taken_at=entry.taken_at,
                    commit=False,
                )
            await self.db.commit()

        except Exception as e:
            await self.db.rollback()
            logger.error(f"Import for user {user_id} rolled back: {e}")
            raise

        result.doses_imported = len(slots)
        result.doses_skipped = len(blob.dose_history) - len(slots)
        logger.info(
            f"Imported {result.medications_imported} medications and {result.doses_imported} doses "
            f"for user {user_id} ({result.medications_skipped} medications, "
            f"{result.doses_skipped} doses skipped)"
        )
        return result

    @staticmethod
    def _status(entry: LegacyDoseEntry) -> Optional[DoseStatus]:
        if entry.status is None:
            return DoseStatus.TAKEN
        try:
            return DoseStatus(entry.status)
        except ValueError:
            return None
