"""
Validation des saisies / Input validation.
Parse explicite puis controle de plage, sans coercition implicite.
Explicit parse then range check, no implicit coercion.
"""

import enum
import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from diesel_log.errors import ValidationError
from diesel_log.models.diesel_record import (
    LITERS_PRECISION,
    LITERS_SCALE,
    LORRY_NUMBER_MAX_LENGTH,
    PRICE_PRECISION,
    PRICE_SCALE,
)

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_RECORD_ID = re.compile(r"^[0-9]+$")

# Plus grand INTEGER SQLite / BIGINT PostgreSQL / Largest SQLite INTEGER / PostgreSQL BIGINT
MAX_RECORD_ID = 2**63 - 1


class NumberIssue(str, enum.Enum):
    """Raison d'un refus numerique / Why a numeric value was rejected."""
    MISSING = "MISSING"
    NOT_NUMERIC = "NOT_NUMERIC"
    NOT_POSITIVE = "NOT_POSITIVE"
    TOO_LARGE = "TOO_LARGE"
    TOO_SMALL = "TOO_SMALL"


@dataclass(frozen=True)
class ParsedNumber:
    value: Decimal | None = None
    issue: NumberIssue | None = None

    @property
    def ok(self) -> bool:
        return self.issue is None


@dataclass(frozen=True)
class RecordInput:
    """Saisie validee prete a l'insertion / Validated input ready for insert."""
    lorry_number: str
    record_date: date
    price: Decimal
    liters: Decimal


@dataclass(frozen=True)
class RecordFilter:
    """Bornes inclusives sur record_date / Inclusive bounds on record_date.

    ``matches_nothing`` : une borne illisible ne correspond a aucune ligne.
    ``matches_nothing``: an unreadable bound matches no row.
    """
    start_date: date | None = None
    end_date: date | None = None
    matches_nothing: bool = False


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_positive_decimal(value: Any, scale: int | None = None, precision: int | None = None) -> ParsedNumber:
    """Parser un nombre strictement positif / Parse a strictly positive number.

    Avec ``scale``/``precision`` la valeur est arrondie a l'echelle de la colonne
    et doit tenir dans sa precision.
    With ``scale``/``precision`` the value is rounded to the column scale and
    must fit its precision.
    """
    if _is_blank(value):
        return ParsedNumber(issue=NumberIssue.MISSING)
    if isinstance(value, bool) or not isinstance(value, (str, int, float, Decimal)):
        return ParsedNumber(issue=NumberIssue.NOT_NUMERIC)

    raw = value.strip() if isinstance(value, str) else str(value)
    try:
        number = Decimal(raw)
    except InvalidOperation:
        return ParsedNumber(issue=NumberIssue.NOT_NUMERIC)
    if not number.is_finite():
        return ParsedNumber(issue=NumberIssue.NOT_NUMERIC)
    if number <= 0:
        return ParsedNumber(value=number, issue=NumberIssue.NOT_POSITIVE)
    if scale is None or precision is None:
        return ParsedNumber(value=number)

    if number.adjusted() + 1 > precision - scale:
        return ParsedNumber(value=number, issue=NumberIssue.TOO_LARGE)
    rounded = number.quantize(Decimal(1).scaleb(-scale), rounding=ROUND_HALF_UP)
    # 9999999999.999 arrondi deborde / rounding can add an integer digit
    if rounded.adjusted() + 1 > precision - scale:
        return ParsedNumber(value=rounded, issue=NumberIssue.TOO_LARGE)
    if rounded <= 0:
        return ParsedNumber(value=rounded, issue=NumberIssue.TOO_SMALL)
    return ParsedNumber(value=rounded)


def parse_iso_date(value: Any) -> date | None:
    """Parser une date YYYY-MM-DD, None si invalide / Parse YYYY-MM-DD, None if invalid."""
    if not isinstance(value, str):
        return None
    raw = value.strip()
    if not _ISO_DATE.match(raw):
        return None
    try:
        return datetime.strptime(raw, "%Y-%m-%d").date()
    except ValueError:
        return None


def parse_record_id(value: Any) -> int:
    """Parser un id entier positif / Parse a positive integer id."""
    raw = str(value).strip() if value is not None else ""
    if not _RECORD_ID.match(raw) or int(raw) < 1:
        raise ValidationError(["Invalid id"])
    return int(raw)


def _number_errors(field: str, parsed: ParsedNumber, scale: int, precision: int) -> list[str]:
    if parsed.issue is NumberIssue.MISSING:
        return [f"{field} is required"]
    if parsed.issue is NumberIssue.NOT_NUMERIC:
        return [f"{field} must be a number"]
    if parsed.issue is NumberIssue.NOT_POSITIVE:
        return [f"{field} must be a positive number"]
    if parsed.issue is NumberIssue.TOO_LARGE:
        return [f"{field} must have at most {precision - scale} digits before the decimal point"]
    if parsed.issue is NumberIssue.TOO_SMALL:
        return [f"{field} must be at least {Decimal(1).scaleb(-scale)}"]
    return []


def validate_record_input(
    lorry_number: Any,
    record_date: Any,
    price: Any,
    liters: Any,
) -> RecordInput:
    """Valider une saisie complete / Validate a full record input.

    Collecte toutes les erreurs avant de lever / Collects every error before raising.
    """
    errors: list[str] = []

    lorry = str(lorry_number).strip() if lorry_number is not None else ""
    if not lorry:
        errors.append("lorry_number is required")
    elif len(lorry) > LORRY_NUMBER_MAX_LENGTH:
        errors.append(f"lorry_number must be at most {LORRY_NUMBER_MAX_LENGTH} characters")

    parsed_date = None
    if _is_blank(record_date):
        errors.append("record_date is required (YYYY-MM-DD)")
    else:
        parsed_date = parse_iso_date(record_date)
        if parsed_date is None:
            errors.append("record_date must be a valid date (YYYY-MM-DD)")

    parsed_price = parse_positive_decimal(price, PRICE_SCALE, PRICE_PRECISION)
    errors.extend(_number_errors("price", parsed_price, PRICE_SCALE, PRICE_PRECISION))
    parsed_liters = parse_positive_decimal(liters, LITERS_SCALE, LITERS_PRECISION)
    errors.extend(_number_errors("liters", parsed_liters, LITERS_SCALE, LITERS_PRECISION))

    if errors:
        raise ValidationError(errors)

    return RecordInput(
        lorry_number=lorry,
        record_date=parsed_date,
        price=parsed_price.value,
        liters=parsed_liters.value,
    )


def parse_filter(start_date: Any = None, end_date: Any = None) -> RecordFilter:
    """Parser les bornes de filtre / Parse filter bounds.

    Vide = absente ; illisible = aucun resultat, comme une comparaison a NULL.
    Empty means absent; unreadable means no result, like a comparison with NULL.
    """
    bounds: dict[str, date | None] = {}
    matches_nothing = False
    for name, raw in (("start_date", start_date), ("end_date", end_date)):
        if _is_blank(raw):
            bounds[name] = None
            continue
        parsed = parse_iso_date(raw)
        if parsed is None:
            matches_nothing = True
        bounds[name] = parsed
    return RecordFilter(matches_nothing=matches_nothing, **bounds)
