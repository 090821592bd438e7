"""CLI tests for the inspect command."""


def test_inspect_desc(invoke, people_csv):
    result = invoke(["inspect", str(people_csv), "--desc"])
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert [line.split()[0] for line in lines] == ["id", "name", "age", "city"]
    assert lines[1].split()[1] == "VARCHAR"


def test_inspect_row_count(invoke, people_parquet):
    result = invoke(["inspect", str(people_parquet), "-r"])
    assert result.exit_code == 0
    assert result.output.strip() == "Row count: 120"


def test_inspect_null_count(invoke, people_csv, people):
    expected = sum(1 for r in people if r[3] is None)
    result = invoke(["inspect", str(people_csv), "--null-count", "city"])
    assert result.exit_code == 0
    assert result.output.strip() == f"Null values in column 'city': {expected}"


def test_inspect_null_count_unknown_column(invoke, people_csv):
    result = invoke(["inspect", str(people_csv), "-n", "salary"])
    assert result.exit_code == 1
    assert "Error: Invalid column name: salary" in result.output


def test_inspect_convert(invoke, people_csv):
    result = invoke(["inspect", str(people_csv), "--convert", "parquet"])
    target = people_csv.with_suffix(".parquet")
    assert result.exit_code == 0
    assert result.output.strip() == f"File converted to {target}"
    assert target.exists()

    result = invoke(["inspect", str(target), "-r"])
    assert result.output.strip() == "Row count: 120"


def test_inspect_unsupported_extension(invoke, tmp_path):
    path = tmp_path / "data.txt"
    path.write_text("a,b\n1,2\n")
    result = invoke(["inspect", str(path), "--desc"])
    assert result.exit_code == 1
    assert "Expected .parquet or .csv file, got .txt" in result.output


def test_inspect_missing_file(invoke, tmp_path):
    result = invoke(["inspect", str(tmp_path / "gone.csv"), "--row-count"])
    assert result.exit_code == 1
    assert "File not found" in result.output


def test_inspect_requires_one_option(invoke, people_csv):
    result = invoke(["inspect", str(people_csv), "--desc", "--row-count"])
    assert result.exit_code == 1
    assert "Specify exactly one of --desc, --row-count, --null-count, --convert" in result.output
