"""Spreadsheet import/export of properties."""

from __future__ import annotations

import io
import logging
import os
from collections.abc import Iterable, Mapping
from typing import Any

import pandas as pd

from crm.fields import PROPERTY_FIELD_NAMES, PROPERTY_FIELDS
from crm.schemas.property import PropertyRecord
from crm.utils.codes import generate_property_code
from crm.utils.exceptions import SpreadsheetError

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    return str(value).strip()


def read_property_rows(filename: str, content: bytes) -> list[dict[str, str]]:
    """Rows of the first sheet as column-header -> cell-text mappings."""
    ext = os.path.splitext(filename)[1].lower()
    engine = "xlrd" if ext == ".xls" else "openpyxl"
    try:
        frame = pd.read_excel(
            io.BytesIO(content),
            sheet_name=0,
            dtype=str,
            keep_default_na=False,
            engine=engine,
        )
    except Exception as e:
        logger.exception("Could not read spreadsheet %s", filename)
        raise SpreadsheetError(f"Could not read spreadsheet '{filename}': {e}") from e

    columns = [str(c).strip() for c in frame.columns]
    return [
        {column: _cell_text(value) for column, value in zip(columns, row)}
        for row in frame.itertuples(index=False, name=None)
    ]


def _lookup(row: Mapping[str, str], keys: Iterable[str]) -> str:
    for key in keys:
        value = row.get(key, "")
        if value:
            return value
    return ""


def row_to_property(row: Mapping[str, str]) -> PropertyRecord:
    """Map a spreadsheet row to a new property.

    Each field is read from its wire-name column first, then from its
    Vietnamese label columns.  The internal code is always freshly generated,
    so importing a row identical to an existing record creates a new one.
    """
    values = {
        spec.name: _lookup(row, (spec.name, *spec.labels))
        for spec in PROPERTY_FIELDS
        if spec.name != "maBatDongSan"
    }
    values["maBatDongSan"] = generate_property_code()
    return PropertyRecord.model_validate(values)


def export_properties(properties: Iterable[PropertyRecord], sheet_name: str) -> bytes:
    """Single-sheet workbook with one column per wire name, without store ids."""
    frame = pd.DataFrame(
        [p.to_document() for p in properties], columns=list(PROPERTY_FIELD_NAMES)
    )
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        frame.to_excel(writer, sheet_name=sheet_name, index=False)
    return buffer.getvalue()
