"""Schémas Enregistrement gasoil / Diesel record schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict


class RecordCreate(BaseModel):
    """Corps brut du formulaire / Raw form body.

    Les champs restent permissifs : la validation metier est faite par le service.
    Fields stay permissive: business validation is done by the service.
    """
    lorry_number: str | None = None
    record_date: str | None = None
    price: str | float | None = None
    liters: str | float | None = None


class RecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    lorry_number: str
    record_date: date
    price: float
    liters: float
    created_at: datetime


class DeleteResult(BaseModel):
    success: bool = True
    id: int


class RecordSummary(BaseModel):
    count: int = 0
    total_liters: float = 0.0
    total_price: float = 0.0
