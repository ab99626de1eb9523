"""Tests for spreadsheet import and export of properties."""

from __future__ import annotations

import io
import os
import sys

import pandas as pd
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from crm.fields import PROPERTY_FIELD_NAMES
from crm.schemas.property import PropertyRecord
from crm.services.spreadsheet_service import (
    export_properties,
    read_property_rows,
    row_to_property,
)
from crm.utils.exceptions import SpreadsheetError
from crm.utils.file_handling import validate_spreadsheet


def _xlsx(frame: pd.DataFrame) -> bytes:
    buffer = io.BytesIO()
    frame.to_excel(buffer, index=False, engine="openpyxl")
    return buffer.getvalue()


# ── Row mapping ────────────────────────────────────────────────────────────


class TestRowToProperty:
    def test_reads_vietnamese_labels(self):
        prop = row_to_property(
            {"Tiêu đề": "Nhà phố", "Vị trí": "Quận 3", "Giá": "4 tỷ", "Số phòng ngủ": "3"}
        )
        assert prop.title == "Nhà phố"
        assert prop.location == "Quận 3"
        assert prop.price == "4 tỷ"
        assert prop.bedrooms == "3"

    def test_wire_name_column_wins_over_label(self):
        prop = row_to_property({"title": "From wire name", "Tiêu đề": "From label"})
        assert prop.title == "From wire name"

    def test_price_accepts_total_land_price_label(self):
        prop = row_to_property({"Tổng giá đất": "2,5 tỷ"})
        assert prop.price == "2,5 tỷ"
        assert prop.tong_gia_dat == "2,5 tỷ"

    def test_code_is_always_regenerated(self):
        prop = row_to_property({"maBatDongSan": "BDS-OLD001", "Mã BĐS": "BDS-OLD002"})
        assert prop.ma_bat_dong_san.startswith("BDS-")
        assert prop.ma_bat_dong_san not in ("BDS-OLD001", "BDS-OLD002")

    def test_missing_columns_become_empty(self):
        prop = row_to_property({})
        assert prop.title == ""
        assert prop.id is None


# ── Reading ────────────────────────────────────────────────────────────────


class TestReadPropertyRows:
    def test_cells_are_read_as_text(self):
        frame = pd.DataFrame({"Tiêu đề": ["Nhà A", "Nhà B"], "Số phòng ngủ": ["3", None]})
        rows = read_property_rows("data.xlsx", _xlsx(frame))
        assert rows[0] == {"Tiêu đề": "Nhà A", "Số phòng ngủ": "3"}
        assert rows[1]["Số phòng ngủ"] == ""

    def test_only_first_sheet_is_read(self):
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            pd.DataFrame({"Tiêu đề": ["First"]}).to_excel(writer, sheet_name="A", index=False)
            pd.DataFrame({"Tiêu đề": ["Second"]}).to_excel(writer, sheet_name="B", index=False)
        rows = read_property_rows("data.xlsx", buffer.getvalue())
        assert [r["Tiêu đề"] for r in rows] == ["First"]

    def test_corrupt_file_raises(self):
        with pytest.raises(SpreadsheetError):
            read_property_rows("data.xlsx", b"\x00\x01 definitely not a workbook")


# ── Export ─────────────────────────────────────────────────────────────────


class TestExportProperties:
    def test_one_column_per_field_in_form_order(self):
        props = [
            PropertyRecord.model_validate(
                {"id": "doc-1", "maBatDongSan": "BDS-AAAAAA", "title": "Căn hộ", "toaDoVN2000": "x"}
            )
        ]
        content = export_properties(props, "Bất động sản")

        frame = pd.read_excel(
            io.BytesIO(content), sheet_name="Bất động sản", dtype=str, keep_default_na=False
        )
        assert list(frame.columns) == list(PROPERTY_FIELD_NAMES)
        assert frame.loc[0, "title"] == "Căn hộ"
        assert frame.loc[0, "toaDoVN2000"] == "x"
        assert "doc-1" not in frame.values

    def test_exported_file_imports_back(self):
        exported = PropertyRecord.model_validate(
            {"title": "Đất nền", "location": "Long An", "price": "900 triệu", "tags": "đất, sổ đỏ"}
        )
        rows = read_property_rows("export.xlsx", export_properties([exported], "Sheet"))
        imported = row_to_property(rows[0])

        assert imported.title == exported.title
        assert imported.location == exported.location
        assert imported.price == exported.price
        assert imported.tags == exported.tags


# ── Upload validation ──────────────────────────────────────────────────────


class TestValidateSpreadsheet:
    def test_accepts_xlsx_and_xls(self):
        validate_spreadsheet("nha.xlsx", 100)
        validate_spreadsheet("NHA.XLS", 100)

    @pytest.mark.parametrize(
        "filename, size",
        [(None, 10), ("", 10), ("nha.csv", 10), ("nha.xlsx", 0), ("nha.xlsx", 11 * 1024 * 1024)],
    )
    def test_rejects(self, filename, size):
        with pytest.raises(ValueError):
            validate_spreadsheet(filename, size)
