"""
Service Enregistrements gasoil / Diesel record service.
Creation, liste filtree, suppression et export / Create, filtered list, delete and export.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError

from diesel_log.database import RecordStore
from diesel_log.errors import NotFoundError, StorageError
from diesel_log.models.diesel_record import DieselRecord
from diesel_log.schemas.diesel_record import DeleteResult, RecordCreate, RecordRead, RecordSummary
from diesel_log.services.export_service import RECORD_FIELDS, ExportService
from diesel_log.services.query_builder import RecordQuery
from diesel_log.services.validation import MAX_RECORD_ID, parse_filter, parse_record_id, validate_record_input

logger = logging.getLogger(__name__)


class RecordService:
    """Operations sur les enregistrements / Record operations.

    Sans etat : la base est la seule source de verite.
    Stateless: the database is the only source of truth.
    """

    def __init__(self, store: RecordStore):
        self.store = store

    async def create(self, data: RecordCreate) -> RecordRead:
        """Creer un enregistrement / Create a record."""
        valid = validate_record_input(data.lorry_number, data.record_date, data.price, data.liters)
        try:
            async with self.store.session() as session:
                entry = DieselRecord(
                    lorry_number=valid.lorry_number,
                    record_date=valid.record_date,
                    price=valid.price,
                    liters=valid.liters,
                )
                session.add(entry)
                await session.flush()
                await session.refresh(entry)
                record = RecordRead.model_validate(entry)
        except SQLAlchemyError as exc:
            logger.exception("Insert into diesel_records failed")
            raise StorageError("Failed to create record") from exc
        logger.info("Created diesel record %s for lorry %s", record.id, record.lorry_number)
        return record

    async def list(self, start_date: Any = None, end_date: Any = None) -> list[RecordRead]:
        """Lister les enregistrements filtres / List filtered records, newest date first."""
        query = RecordQuery.from_filter(parse_filter(start_date, end_date))
        try:
            async with self.store.session() as session:
                result = await session.execute(query.select())
                return [RecordRead.model_validate(row) for row in result.scalars().all()]
        except SQLAlchemyError as exc:
            logger.exception("Select from diesel_records failed")
            raise StorageError("Failed to fetch records") from exc

    async def remove(self, record_id: Any) -> DeleteResult:
        """Supprimer un enregistrement / Delete a record."""
        entry_id = parse_record_id(record_id)
        # Au-dela d'un entier 64 bits aucune ligne ne peut exister /
        # Beyond a 64-bit integer no row can exist
        if entry_id > MAX_RECORD_ID:
            raise NotFoundError("Record not found")
        try:
            async with self.store.session() as session:
                result = await session.execute(delete(DieselRecord).where(DieselRecord.id == entry_id))
                deleted = result.rowcount
        except SQLAlchemyError as exc:
            logger.exception("Delete from diesel_records failed for id %s", entry_id)
            raise StorageError("Failed to delete record") from exc
        if deleted == 0:
            raise NotFoundError("Record not found")
        logger.info("Deleted diesel record %s", entry_id)
        return DeleteResult(success=True, id=entry_id)

    async def _export_rows(self, start_date: Any, end_date: Any, message: str) -> list[RecordRead]:
        try:
            return await self.list(start_date, end_date)
        except StorageError as exc:
            raise StorageError(message) from exc

    async def export_csv(self, start_date: Any = None, end_date: Any = None) -> bytes:
        """Exporter en CSV, meme ordre que la liste / Export as CSV, same order as list."""
        records = await self._export_rows(start_date, end_date, "Failed to export CSV")
        return ExportService.to_csv([r.model_dump(mode="json") for r in records], RECORD_FIELDS)

    async def export_xlsx(self, start_date: Any = None, end_date: Any = None) -> bytes:
        """Exporter en Excel / Export as Excel."""
        records = await self._export_rows(start_date, end_date, "Failed to export XLSX")
        return ExportService.to_xlsx([r.model_dump() for r in records], RECORD_FIELDS)

    async def summarize(self, start_date: Any = None, end_date: Any = None) -> RecordSummary:
        """Totaux du filtre courant / Totals for the current filter."""
        query = RecordQuery.from_filter(parse_filter(start_date, end_date))
        try:
            async with self.store.session() as session:
                count, total_liters, total_price = (await session.execute(query.totals())).one()
        except SQLAlchemyError as exc:
            logger.exception("Aggregate over diesel_records failed")
            raise StorageError("Failed to compute summary") from exc
        return RecordSummary(
            count=count or 0,
            total_liters=round(float(total_liters or 0), 3),
            total_price=round(float(total_price or 0), 2),
        )
