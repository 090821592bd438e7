"""Tests for the DuckDB engine against real CSV and Parquet files."""

import duckdb
import pytest

from ftool.core.filters import FilterBuilder, Predicate
from ftool.engine.duckdb_ import (
    DuckDbEngine,
    _translate,
    describe_columns,
    is_numeric,
    is_temporal,
    source_format,
)
from ftool.exceptions import EngineError, EngineErrorKind


def test_source_format():
    assert source_format("a.CSV") == "csv"
    assert source_format("a.parquet") == "parquet"
    with pytest.raises(EngineError) as exc:
        source_format("a.txt")
    assert exc.value.kind is EngineErrorKind.UNSUPPORTED_FORMAT
    assert str(exc.value) == "Expected .parquet or .csv file, got .txt"


def test_type_classes():
    assert is_numeric("BIGINT")
    assert is_numeric("DECIMAL(18,3)")
    assert not is_numeric("VARCHAR")
    assert is_temporal("TIMESTAMP WITH TIME ZONE")
    assert is_temporal("DATE")
    assert not is_temporal("BOOLEAN")


def test_missing_file(tmp_path):
    with pytest.raises(EngineError) as exc:
        DuckDbEngine(tmp_path / "nope.csv")
    assert exc.value.kind is EngineErrorKind.UNREADABLE


def test_columns(people_csv):
    with DuckDbEngine(people_csv) as engine:
        columns = engine.columns()
    assert [name for name, _ in columns] == ["id", "name", "age", "city"]
    assert describe_columns(columns)[1] == f"{'name':<20} VARCHAR"


def test_schema_statistics(people_csv, people):
    """Test null counts for every column and min/max/avg only where typed."""
    with DuckDbEngine(people_csv) as engine:
        schema = {entry.name: entry for entry in engine.schema()}

    ages = [r[2] for r in people]
    age = schema["age"]
    assert age.null_count == 0
    assert (age.min, age.max) == (min(ages), max(ages))
    assert float(age.avg) == pytest.approx(round(sum(ages) / len(ages), 2))

    city = schema["city"]
    assert city.null_count == sum(1 for r in people if r[3] is None)
    assert city.min is None and city.max is None and city.avg is None


@pytest.mark.parametrize("fixture", ["people_csv", "people_parquet"])
def test_row_count_and_query(request, fixture, people):
    path = request.getfixturevalue(fixture)
    with DuckDbEngine(path) as engine:
        assert engine.row_count() == len(people)
        columns, rows = engine.query(offset=100, limit=50)

    assert columns == ["id", "name", "age", "city"]
    assert [r[0] for r in rows] == list(range(101, 121))


def test_filtered_count(people_csv, people):
    builder = FilterBuilder(("id", "name", "age", "city"))
    builder.add_condition("age", ">", "30")
    builder.add_condition("age", "<", "50")

    with DuckDbEngine(people_csv) as engine:
        count = engine.row_count(builder.compile())
    assert count == sum(1 for r in people if 30 < r[2] < 50)


def test_null_count(people_csv, people):
    with DuckDbEngine(people_csv) as engine:
        assert engine.null_count("city") == sum(1 for r in people if r[3] is None)
        assert engine.null_counts()["name"] == 0
        with pytest.raises(EngineError, match="Invalid column name: salary"):
            engine.null_count("salary")


def test_convert_round_trip(people_csv, people):
    """Test csv -> parquet writes a sibling and leaves the source alone."""
    with DuckDbEngine(people_csv) as engine:
        target = engine.convert("parquet")
        assert engine.convert("csv") == people_csv

    assert target == people_csv.with_suffix(".parquet")
    with DuckDbEngine(target) as converted:
        assert converted.row_count() == len(people)
        back = converted.convert("csv")
    assert back == people_csv


def test_convert_unknown_target(people_csv):
    with DuckDbEngine(people_csv) as engine:
        with pytest.raises(EngineError) as exc:
            engine.convert("xlsx")
    assert exc.value.kind is EngineErrorKind.UNSUPPORTED_FORMAT


def test_corrupt_parquet(tmp_path):
    path = tmp_path / "bad.parquet"
    path.write_bytes(b"not a parquet file at all")
    with DuckDbEngine(path) as engine:
        with pytest.raises(EngineError) as exc:
            engine.schema()
    assert exc.value.kind in (EngineErrorKind.CORRUPT, EngineErrorKind.UNREADABLE)


def test_bad_predicate_is_query_error(people_csv):
    with DuckDbEngine(people_csv) as engine:
        with pytest.raises(EngineError) as exc:
            engine.row_count(Predicate('"nope" = 1'))
    assert exc.value.kind is EngineErrorKind.QUERY


def test_closed_engine(people_csv):
    engine = DuckDbEngine(people_csv)
    engine.close()
    engine.close()
    with pytest.raises(EngineError, match="closed"):
        engine.row_count()


def test_interrupt_maps_to_timeout():
    error = _translate(duckdb.InterruptException("INTERRUPT Error"), "Counting rows")
    assert error.kind is EngineErrorKind.TIMEOUT
    assert str(error) == "Counting rows timed out"
