"""Routes Enregistrements gasoil / Diesel record API routes."""

import io

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse

from diesel_log.api.deps import get_record_service
from diesel_log.config import settings
from diesel_log.rate_limit import limiter
from diesel_log.schemas.diesel_record import DeleteResult, RecordCreate, RecordRead, RecordSummary
from diesel_log.services.record_service import RecordService

router = APIRouter()

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _attachment(content: bytes, media_type: str, extension: str) -> StreamingResponse:
    # Content-Type pose tel quel : Starlette ajouterait "; charset" aux types text/*
    # Content-Type set verbatim: Starlette would append "; charset" to text/* types
    return StreamingResponse(
        io.BytesIO(content),
        headers={
            "Content-Type": media_type,
            "Content-Disposition": f'attachment; filename="{settings.EXPORT_FILENAME}.{extension}"',
        },
    )


@router.get("", response_model=list[RecordRead])
@router.get("/", response_model=list[RecordRead], include_in_schema=False)
@limiter.limit(settings.RATE_LIMIT_DEFAULT)
async def list_records(
    request: Request,
    start_date: str | None = Query(default=None),
    end_date: str | None = Query(default=None),
    service: RecordService = Depends(get_record_service),
):
    """Lister les enregistrements (date DESC, id DESC) / List records (date DESC, id DESC)."""
    return await service.list(start_date, end_date)


@router.post("", response_model=RecordRead, status_code=201)
@router.post("/", response_model=RecordRead, status_code=201, include_in_schema=False)
@limiter.limit(settings.RATE_LIMIT_WRITE)
async def create_record(
    request: Request,
    data: RecordCreate | None = None,
    service: RecordService = Depends(get_record_service),
):
    """Créer un enregistrement / Create a record."""
    return await service.create(data or RecordCreate())


@router.get("/csv")
@limiter.limit(settings.RATE_LIMIT_DEFAULT)
async def export_records_csv(
    request: Request,
    start_date: str | None = Query(default=None),
    end_date: str | None = Query(default=None),
    service: RecordService = Depends(get_record_service),
):
    """Exporter en CSV / Export records to CSV."""
    content = await service.export_csv(start_date, end_date)
    return _attachment(content, "text/csv", "csv")


@router.get("/xlsx")
@limiter.limit(settings.RATE_LIMIT_DEFAULT)
async def export_records_xlsx(
    request: Request,
    start_date: str | None = Query(default=None),
    end_date: str | None = Query(default=None),
    service: RecordService = Depends(get_record_service),
):
    """Exporter en Excel / Export records to XLSX."""
    content = await service.export_xlsx(start_date, end_date)
    return _attachment(content, XLSX_MEDIA_TYPE, "xlsx")


@router.get("/summary", response_model=RecordSummary)
@limiter.limit(settings.RATE_LIMIT_DEFAULT)
async def summarize_records(
    request: Request,
    start_date: str | None = Query(default=None),
    end_date: str | None = Query(default=None),
    service: RecordService = Depends(get_record_service),
):
    """Totaux (nombre, litres, prix) / Totals (count, liters, price)."""
    return await service.summarize(start_date, end_date)


@router.delete("/{record_id}", response_model=DeleteResult)
@limiter.limit(settings.RATE_LIMIT_WRITE)
async def delete_record(
    request: Request,
    record_id: str,
    service: RecordService = Depends(get_record_service),
):
    """Supprimer un enregistrement / Delete a record."""
    return await service.remove(record_id)
