"""File I/O utilities for reading and writing tabular payloads."""

import io
import tomllib
from pathlib import Path
from typing import BinaryIO

import pandas as pd

from orgchart.errors import FileProcessingError, MalformedInputError
from orgchart.utils.types import TabularFormat

type FilePath = str | Path
type TabularSource = FilePath | bytes | BinaryIO


def detect_format(source: TabularSource, fmt: TabularFormat | str | None = None) -> TabularFormat:
    """Resolve the payload format from an explicit value or the path suffix."""
    if fmt is not None:
        try:
            return TabularFormat(fmt)
        except ValueError as exc:
            raise MalformedInputError(f"Unsupported tabular format: {fmt}") from exc

    if isinstance(source, (str, Path)):
        match Path(source).suffix.lower():
            case ".csv":
                return TabularFormat.CSV
            case ".xlsx" | ".xlsm":
                return TabularFormat.EXCEL
            case ext:
                raise MalformedInputError(f"Unsupported tabular file type: {ext or '<none>'}")
    return TabularFormat.EXCEL


def read_tabular(source: TabularSource, fmt: TabularFormat | str | None = None) -> pd.DataFrame:
    """Read the first sheet (or the CSV body) keeping each cell's own type.

    Cells come back as Python objects (int, float, str, datetime) with blanks as
    NaN, so callers can tell a numeric cell from a text cell. Only empty cells
    count as missing, so text such as "NA" or "None" is kept as written. Blank
    rows are dropped but the index keeps each row's position in the payload.
    """
    resolved = detect_format(source, fmt)
    if isinstance(source, bytes):
        source = io.BytesIO(source)

    try:
        match resolved:
            case TabularFormat.EXCEL:
                frame = pd.read_excel(
                    source,
                    sheet_name=0,
                    header=0,
                    dtype=object,
                    keep_default_na=False,
                    na_values=[""],
                    engine="openpyxl",
                )
            case TabularFormat.CSV:
                frame = pd.read_csv(
                    source,
                    header=0,
                    keep_default_na=False,
                    na_values=[""],
                    skip_blank_lines=False,
                ).astype(object)
    except FileNotFoundError:
        raise
    except OSError as exc:
        raise FileProcessingError(f"Failed to read tabular payload: {exc}") from exc
    except Exception as exc:
        # openpyxl/pandas raise a wide range of parser errors for corrupt payloads
        raise MalformedInputError(f"Could not decode tabular payload: {exc}") from exc

    return frame.dropna(how="all")


def write_output(df: pd.DataFrame, path: FilePath, fmt: TabularFormat | str = TabularFormat.EXCEL) -> Path:
    """Write a DataFrame to the specified format."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        match TabularFormat(fmt):
            case TabularFormat.CSV:
                df.to_csv(path, index=False)
            case TabularFormat.EXCEL:
                df.to_excel(path, index=False, sheet_name="Employees", engine="openpyxl")
    except OSError as exc:
        raise FileProcessingError(f"Failed to write {path}: {exc}") from exc
    return path


def load_toml_config(path: FilePath) -> dict:
    """Load a TOML configuration file using Python 3.11+ stdlib."""
    with open(path, "rb") as f:
        return tomllib.load(f)
