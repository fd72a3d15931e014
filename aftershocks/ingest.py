from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import IO, Iterable, List, Optional, Union

import pandas as pd
import requests
from loguru import logger

from aftershocks.errors import DataLoadError, MissingColumnError

Source = Union[str, Path, IO]

DELIMITERS = ",\t|;"
ENCODINGS = ["utf-8", "utf-8-sig", "latin1"]
HTTP_TIMEOUT_S = 15


# -----------------------
# Raw bytes
# -----------------------

def _is_url(source) -> bool:
    return isinstance(source, str) and source.lower().startswith(("http://", "https://"))


def _read_bytes(source: Source) -> bytes:
    if hasattr(source, "read"):
        if hasattr(source, "seek"):
            source.seek(0)
        data = source.read()
        return data.encode("utf-8") if isinstance(data, str) else data
    if _is_url(source):
        r = requests.get(source, timeout=HTTP_TIMEOUT_S)
        r.raise_for_status()
        return r.content
    return Path(source).expanduser().read_bytes()


def _decode(data: bytes) -> str:
    last_error = None
    for enc in ENCODINGS:
        try:
            return data.decode(enc)
        except UnicodeDecodeError as e:
            last_error = e
            continue
    # latin1 never fails, kept for completeness
    raise last_error if last_error is not None else ValueError(
        "Could not decode table with any of the tried encodings."
    )


# -----------------------
# Table parsing
# -----------------------

def sniff_delimiter(sample: str) -> str:
    """Pick the delimiter among comma, tab, pipe and semicolon; comma if unsure."""
    header = sample.splitlines()[0] if sample else ""
    try:
        return csv.Sniffer().sniff(sample, delimiters=DELIMITERS).delimiter
    except csv.Error:
        pass
    # Sniffer gives up on single-column or very short samples
    counts = {d: header.count(d) for d in DELIMITERS}
    best = max(counts, key=counts.get)
    return best if counts[best] > 0 else ","


def read_table(source: Source) -> pd.DataFrame:
    """
    Robust table reader:
    - Accepts a path, an http(s) URL or an uploaded file object
    - Tries multiple encodings
    - Detects the delimiter among , TAB | ;
    - Header names are stripped of surrounding whitespace
    """
    text = _decode(_read_bytes(source))
    sample = "\n".join(text.splitlines()[:20])
    sep = sniff_delimiter(sample)

    df = pd.read_csv(
        io.StringIO(text),
        sep=sep,
        skip_blank_lines=True,
        skipinitialspace=True,
    )
    df.columns = [str(c).strip() for c in df.columns]
    logger.debug("Read table: {} rows, columns={}, sep={!r}", len(df), list(df.columns), sep)
    return df


def table_records(df: pd.DataFrame) -> List[dict]:
    def clean(val):
        if isinstance(val, str):
            return val
        if pd.isna(val):
            return None
        return val

    return [{k: clean(v) for k, v in row.items()} for row in df.to_dict(orient="records")]


def load_table(source: Source) -> List[dict]:
    """Like ``fetch_table`` but raises ``DataLoadError`` instead of returning None."""
    try:
        df = read_table(source)
    except (OSError, ValueError, requests.RequestException, pd.errors.ParserError) as e:
        raise DataLoadError(f"Error loading {_describe(source)}: {e}") from e
    return table_records(df)


def fetch_table(source: Source) -> Optional[List[dict]]:
    """Fetch and parse a delimited table; None on any network or parse error."""
    try:
        records = load_table(source)
    except DataLoadError:
        logger.exception("Error loading data from {}", _describe(source))
        return None
    logger.info("Loaded {} records from {}", len(records), _describe(source))
    return records


def _describe(source: Source) -> str:
    return getattr(source, "name", None) or str(source)


def load_error_message(name: str, uploaded: bool = False) -> str:
    """User-facing text for a table that could not be loaded."""
    if uploaded:
        return f"Could not parse {name} - check that it is a delimited text table with a header row"
    return f"Error loading {name} - make sure the file is in the same directory"


# -----------------------
# Columns
# -----------------------

def find_column(columns: Iterable[str], name: str) -> str:
    """Resolve a required header name, ignoring case and surrounding whitespace."""
    columns = list(columns)
    wanted = name.strip().lower()
    for c in columns:
        if str(c).strip().lower() == wanted:
            return c
    raise MissingColumnError(name, columns)


def events_template_csv_bytes() -> bytes:
    """Empty aftershock CSV with the required headers."""
    df = pd.DataFrame(columns=["time", "magnitude"])
    buf = io.StringIO()
    df.to_csv(buf, index=False)
    return buf.getvalue().encode("utf-8")
