from __future__ import annotations

import io
from pathlib import Path

import pytest

from aftershocks.errors import DataLoadError, MissingColumnError
from aftershocks.ingest import (
    events_template_csv_bytes,
    fetch_table,
    find_column,
    load_error_message,
    load_table,
    read_table,
    sniff_delimiter,
)


@pytest.mark.parametrize("sep", [",", "\t", "|", ";"])
def test_sniff_delimiter(sep):
    sample = "\n".join(
        [
            sep.join(["time", "magnitude", "depth"]),
            sep.join(["10 Oct 2025 - 5:14 PM", "3.2", "10"]),
            sep.join(["10 Oct 2025 - 5:20 PM", "2.8", "12"]),
        ]
    )
    assert sniff_delimiter(sample) == sep


def test_sniff_delimiter_defaults_to_comma():
    assert sniff_delimiter("") == ","
    assert sniff_delimiter("time\n10 Oct 2025 - 5:14 PM") == ","


def test_read_table_trims_headers_and_types_numbers(tmp_path: Path):
    p = tmp_path / "data.csv"
    p.write_text(
        " time ;magnitude \n"
        "10 Oct 2025 - 9:43 AM;7.4\n"
        "\n"
        "10 Oct 2025 - 9:50 AM;3.3\n",
        encoding="utf-8",
    )
    df = read_table(p)

    assert list(df.columns) == ["time", "magnitude"]
    assert len(df) == 2
    assert df["magnitude"].tolist() == [7.4, 3.3]


def test_read_table_latin1(tmp_path: Path):
    p = tmp_path / "data.csv"
    p.write_bytes("time,magnitude,place\n10 Oct 2025 - 9:43 AM,7.4,Bañay\n".encode("latin1"))
    df = read_table(p)
    assert df["place"].tolist() == ["Bañay"]


def test_fetch_table_from_upload_with_missing_cells():
    buf = io.BytesIO(b"time,magnitude\n10 Oct 2025 - 9:43 AM,7.4\n,2.0\n10 Oct 2025 - 9:58 AM,\n")
    records = fetch_table(buf)

    assert records == [
        {"time": "10 Oct 2025 - 9:43 AM", "magnitude": 7.4},
        {"time": None, "magnitude": 2.0},
        {"time": "10 Oct 2025 - 9:58 AM", "magnitude": None},
    ]


def test_fetch_table_returns_none_on_failure(tmp_path: Path):
    assert fetch_table(tmp_path / "missing.csv") is None
    assert fetch_table(io.BytesIO(b"")) is None


def test_load_table_raises(tmp_path: Path):
    with pytest.raises(DataLoadError):
        load_table(tmp_path / "missing.csv")


def test_find_column():
    assert find_column(["Time ", "Magnitude"], "magnitude") == "Magnitude"
    assert find_column(["Time ", "Magnitude"], " time") == "Time "
    with pytest.raises(MissingColumnError):
        find_column(["when", "mag"], "time")


def test_events_template_csv_bytes():
    assert events_template_csv_bytes().decode("utf-8").strip() == "time,magnitude"


def test_load_error_message():
    assert load_error_message("data.csv") == (
        "Error loading data.csv - make sure the file is in the same directory"
    )
    uploaded = load_error_message("quakes.xlsx", uploaded=True)
    assert uploaded.startswith("Could not parse quakes.xlsx")
    assert "same directory" not in uploaded
