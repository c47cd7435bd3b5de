"""Modèle Enregistrement gasoil / Diesel record model."""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from diesel_log.database import Base

LORRY_NUMBER_MAX_LENGTH = 50
PRICE_PRECISION, PRICE_SCALE = 12, 2
LITERS_PRECISION, LITERS_SCALE = 12, 3


class DieselRecord(Base):
    """Achat de gasoil pour un camion / Diesel purchase for a lorry."""
    __tablename__ = "diesel_records"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    lorry_number: Mapped[str] = mapped_column(String(LORRY_NUMBER_MAX_LENGTH), nullable=False)
    record_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    price: Mapped[float] = mapped_column(Numeric(PRICE_PRECISION, PRICE_SCALE, asdecimal=False), nullable=False)
    liters: Mapped[float] = mapped_column(Numeric(LITERS_PRECISION, LITERS_SCALE, asdecimal=False), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"<DieselRecord {self.id} {self.lorry_number} {self.record_date} - {self.liters}L>"
