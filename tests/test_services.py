"""Tests des services / Service tests."""

import csv
import io
from datetime import date
from decimal import Decimal

import pytest

from diesel_log.errors import NotFoundError, StorageError, ValidationError
from diesel_log.schemas.diesel_record import RecordCreate
from diesel_log.services.export_service import RECORD_FIELDS, ExportService
from diesel_log.services.query_builder import Bound, RecordQuery
from diesel_log.services.validation import (
    NumberIssue,
    RecordFilter,
    parse_filter,
    parse_iso_date,
    parse_positive_decimal,
    parse_record_id,
    validate_record_input,
)


def test_parse_positive_decimal():
    assert parse_positive_decimal("100.50").value == Decimal("100.50")
    assert parse_positive_decimal(" 7 ").value == Decimal("7")
    assert parse_positive_decimal(2.5).value == Decimal("2.5")
    assert parse_positive_decimal(None).issue is NumberIssue.MISSING
    assert parse_positive_decimal("  ").issue is NumberIssue.MISSING
    assert parse_positive_decimal("abc").issue is NumberIssue.NOT_NUMERIC
    assert parse_positive_decimal("NaN").issue is NumberIssue.NOT_NUMERIC
    assert parse_positive_decimal("Infinity").issue is NumberIssue.NOT_NUMERIC
    assert parse_positive_decimal(True).issue is NumberIssue.NOT_NUMERIC
    assert parse_positive_decimal("0").issue is NumberIssue.NOT_POSITIVE
    assert parse_positive_decimal(-1).issue is NumberIssue.NOT_POSITIVE


def test_parse_positive_decimal_fits_column():
    # Numeric(12, 2) : 10 chiffres entiers / 10 integer digits
    assert parse_positive_decimal("0.005", 2, 12).value == Decimal("0.01")
    assert parse_positive_decimal("10.255", 2, 12).value == Decimal("10.26")
    assert parse_positive_decimal("9999999999.99", 2, 12).ok
    assert parse_positive_decimal("0.004", 2, 12).issue is NumberIssue.TOO_SMALL
    assert parse_positive_decimal("1e400", 2, 12).issue is NumberIssue.TOO_LARGE
    assert parse_positive_decimal("12345678901", 2, 12).issue is NumberIssue.TOO_LARGE
    assert parse_positive_decimal("9999999999.999", 2, 12).issue is NumberIssue.TOO_LARGE
    assert parse_positive_decimal("1e400").value == Decimal("1e400")


def test_validate_record_input_range_messages():
    with pytest.raises(ValidationError) as exc:
        validate_record_input("KA01", "2024-03-01", "1e400", "0.0004")
    assert exc.value.messages == [
        "price must have at most 10 digits before the decimal point",
        "liters must be at least 0.001",
    ]


def test_parse_iso_date():
    assert parse_iso_date("2024-03-01") == date(2024, 3, 1)
    assert parse_iso_date("2024-02-30") is None
    assert parse_iso_date("20240301") is None
    assert parse_iso_date("01/03/2024") is None
    assert parse_iso_date(None) is None


def test_parse_record_id():
    assert parse_record_id("42") == 42
    assert parse_record_id(7) == 7
    for bad in ("abc", "0", "-2", "1.0", "", None, "٣"):
        with pytest.raises(ValidationError) as exc:
            parse_record_id(bad)
        assert exc.value.messages == ["Invalid id"]


def test_validate_record_input_trims_and_parses():
    valid = validate_record_input("  KA01AB1234 ", "2024-03-01", "100.50", 25)
    assert valid.lorry_number == "KA01AB1234"
    assert valid.record_date == date(2024, 3, 1)
    assert valid.price == Decimal("100.50")
    assert valid.liters == Decimal("25")


def test_validate_record_input_collects_in_order():
    with pytest.raises(ValidationError) as exc:
        validate_record_input("X" * 51, "nope", "-1", "abc")
    assert exc.value.messages == [
        "lorry_number must be at most 50 characters",
        "record_date must be a valid date (YYYY-MM-DD)",
        "price must be a positive number",
        "liters must be a number",
    ]
    assert exc.value.to_dict()["errors"] == exc.value.messages


def test_parse_filter():
    assert parse_filter() == RecordFilter()
    assert parse_filter("", "  ") == RecordFilter()
    assert parse_filter("2024-01-10", None) == RecordFilter(start_date=date(2024, 1, 10))
    unreadable = parse_filter("bad", "2024-01-20")
    assert unreadable == RecordFilter(end_date=date(2024, 1, 20), matches_nothing=True)
    assert parse_filter(None, "2024-13-01").matches_nothing


def test_query_builder_binds_parameters():
    query = RecordQuery.from_filter(RecordFilter(date(2024, 1, 10), date(2024, 1, 20)))
    assert [p.bound for p in query.predicates] == [Bound.START, Bound.END]

    statement = query.select()
    sql = str(statement)
    assert "2024-01-10" not in sql
    assert "diesel_records.record_date >= :record_date_1" in sql
    assert "diesel_records.record_date <= :record_date_2" in sql
    assert "ORDER BY diesel_records.record_date DESC, diesel_records.id DESC" in sql
    assert set(statement.compile().params.values()) == {date(2024, 1, 10), date(2024, 1, 20)}


def test_query_builder_without_predicates():
    sql = str(RecordQuery().select())
    assert "WHERE" not in sql
    assert "WHERE" in str(RecordQuery().since(date(2024, 1, 1)).totals())


def test_query_builder_matches_nothing():
    query = RecordQuery.from_filter(RecordFilter(end_date=date(2024, 1, 20), matches_nothing=True))
    sql = str(query.select())
    assert "WHERE" in sql
    assert "false" in sql.lower() or "0 = 1" in sql
    assert "WHERE" in str(RecordQuery().nothing().totals())


def test_to_csv_escapes_fields():
    rows = [{"id": 1, "lorry_number": 'A,"B"\nC', "record_date": "2024-01-01",
             "price": 1.5, "liters": 2.0, "created_at": "2024-01-01T00:00:00"}]
    content = ExportService.to_csv(rows, RECORD_FIELDS).decode("utf-8")
    assert content.startswith("id,lorry_number,record_date,price,liters,created_at\r\n")
    parsed = list(csv.reader(io.StringIO(content)))
    assert parsed[1] == ["1", 'A,"B"\nC', "2024-01-01", "1.5", "2.0", "2024-01-01T00:00:00"]


@pytest.mark.asyncio
async def test_service_create_list_remove(service):
    created = await service.create(RecordCreate(**{
        "lorry_number": "KA01AB1234", "record_date": "2024-03-01", "price": "100.50", "liters": "25.0",
    }))
    assert created.id >= 1
    assert created.created_at is not None

    records = await service.list()
    assert [r.id for r in records] == [created.id]

    result = await service.remove(str(created.id))
    assert result.success is True
    assert result.id == created.id

    with pytest.raises(NotFoundError):
        await service.remove(created.id)
    with pytest.raises(NotFoundError):
        await service.remove(str(2**63))
    assert await service.list() == []


@pytest.mark.asyncio
async def test_service_invalid_price_writes_nothing(service):
    with pytest.raises(ValidationError) as exc:
        await service.create(RecordCreate(lorry_number="KA01", record_date="2024-03-01", price="0", liters="1"))
    assert any("price" in m for m in exc.value.messages)
    assert await service.list() == []


@pytest.mark.asyncio
async def test_service_export_matches_list_order(service):
    for record_date in ("2024-01-02", "2024-01-03", "2024-01-01"):
        await service.create(RecordCreate(lorry_number="L1", record_date=record_date, price="1", liters="1"))
    records = await service.list()
    rows = list(csv.reader(io.StringIO((await service.export_csv()).decode("utf-8"))))
    assert [int(r[0]) for r in rows[1:]] == [r.id for r in records]
    assert [r[2] for r in rows[1:]] == ["2024-01-03", "2024-01-02", "2024-01-01"]


@pytest.mark.asyncio
async def test_service_storage_error(tmp_path):
    from diesel_log.database import RecordStore
    from diesel_log.services.record_service import RecordService

    store = RecordStore(f"sqlite+aiosqlite:///{tmp_path / 'no_table.db'}")
    service = RecordService(store)
    with pytest.raises(StorageError) as exc:
        await service.list()
    assert exc.value.message == "Failed to fetch records"
    with pytest.raises(StorageError) as exc:
        await service.summarize()
    assert exc.value.message == "Failed to compute summary"
    await store.dispose()
