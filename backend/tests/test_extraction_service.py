"""Unit tests for the extraction client and the draft merge policies."""

from __future__ import annotations

import os
import sys
from unittest.mock import AsyncMock

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from crm.fields import CUSTOMER_NEEDS_FIELDS, PROPERTY_EXTRACTION_FIELDS, SEARCH_FIELDS
from crm.schemas.property import PropertyRecord
from crm.services.extraction_service import (
    extract_customer_needs,
    extract_property_fields,
    extract_search_criteria,
    merge_property_extraction,
    summarize_customer_needs,
    validate_payload,
)
from crm.services.notifications import NotificationLevel
from crm.utils.exceptions import EmptyInputError, ExtractionError


# ── validate_payload ───────────────────────────────────────────────────────


class TestValidatePayload:
    def test_drops_unexpected_keys_and_fills_missing(self):
        result = validate_payload({"location": "Quận 7", "color": "blue"}, SEARCH_FIELDS)
        assert set(result) == set(SEARCH_FIELDS)
        assert result["location"] == "Quận 7"
        assert result["minPrice"] == ""
        assert "color" not in result

    def test_non_string_values_become_text(self):
        result = validate_payload(
            {"minBedrooms": 3, "location": None, "areaKeyword": ["nhỏ", "gọn"]},
            SEARCH_FIELDS,
        )
        assert result["minBedrooms"] == "3"
        assert result["location"] == ""
        assert result["areaKeyword"] == "nhỏ, gọn"

    @pytest.mark.parametrize("raw", [[], "text", None, 42])
    def test_non_object_raises(self, raw):
        with pytest.raises(ExtractionError):
            validate_payload(raw, SEARCH_FIELDS)


# ── Extraction calls ───────────────────────────────────────────────────────


class TestExtractFields:
    @pytest.mark.asyncio
    async def test_empty_input_makes_no_call(self, llm, notifier):
        with pytest.raises(EmptyInputError):
            await extract_property_fields(llm, "   ", notifier)
        llm.extract_fields.assert_not_called()
        assert notifier.current().level == NotificationLevel.WARNING

    @pytest.mark.asyncio
    async def test_requests_exactly_the_property_field_set(self, llm):
        llm.extract_fields = AsyncMock(return_value={"title": "Nhà phố Quận 3"})
        result = await extract_property_fields(llm, "Bán nhà phố Quận 3")

        prompt, field_names = llm.extract_fields.call_args.args
        assert "Bán nhà phố Quận 3" in prompt
        assert tuple(field_names) == PROPERTY_EXTRACTION_FIELDS
        assert result["title"] == "Nhà phố Quận 3"

    @pytest.mark.asyncio
    async def test_provider_failure_is_wrapped(self, llm, notifier):
        llm.extract_fields = AsyncMock(side_effect=RuntimeError("quota exceeded"))
        with pytest.raises(ExtractionError, match="quota exceeded"):
            await extract_customer_needs(llm, "Cần mua căn hộ 2PN", notifier)
        assert notifier.current().level == NotificationLevel.ERROR

    @pytest.mark.asyncio
    async def test_malformed_reply_is_wrapped(self, llm):
        llm.extract_fields = AsyncMock(return_value=["not", "an", "object"])
        with pytest.raises(ExtractionError):
            await extract_customer_needs(llm, "Cần thuê nhà")

    @pytest.mark.asyncio
    async def test_success_notifies_completion(self, llm, notifier):
        llm.extract_fields = AsyncMock(return_value={"location": "Thủ Đức"})
        await extract_customer_needs(llm, "Cần mua đất Thủ Đức", notifier)
        current = notifier.current()
        assert current.level == NotificationLevel.INFO
        assert "complete" in current.message

    @pytest.mark.asyncio
    async def test_search_criteria_normalised(self, llm):
        llm.extract_fields = AsyncMock(
            return_value={"location": "N/A", "minPrice": "1.000.000.000", "maxBedrooms": ""}
        )
        criteria = await extract_search_criteria(llm, "nhà trên 1 tỷ")
        assert criteria.location is None
        assert criteria.max_bedrooms is None
        assert criteria.min_price == "1.000.000.000"
        assert not criteria.is_empty()

    @pytest.mark.asyncio
    async def test_search_with_nothing_extracted_is_empty(self, llm):
        llm.extract_fields = AsyncMock(return_value={})
        criteria = await extract_search_criteria(llm, "sunrise")
        assert criteria.is_empty()


# ── Property merge policy ──────────────────────────────────────────────────


class TestMergePropertyExtraction:
    def test_overwrites_ai_managed_fields(self):
        draft = PropertyRecord.model_validate(
            {"title": "Old", "location": "Old place", "nguoiPhuTrach": "Lan"}
        )
        merged = merge_property_extraction(
            draft, {"title": "Nhà mới", "location": "N/A"}, "raw text"
        )
        assert merged.title == "Nhà mới"
        # Absent or placeholder values clear previously entered values
        assert merged.location == ""
        # Fields outside the AI-managed set are untouched
        assert merged.nguoi_phu_trach == "Lan"

    def test_description_is_always_the_raw_text(self):
        merged = merge_property_extraction(
            PropertyRecord(), {"title": "Căn hộ"}, "Bán căn hộ 2PN giá 2 tỷ"
        )
        assert merged.description == "Bán căn hộ 2PN giá 2 tỷ"

    def test_total_land_price_falls_back_to_price(self):
        merged = merge_property_extraction(PropertyRecord(), {"price": "2 tỷ"}, "x")
        assert merged.tong_gia_dat == "2 tỷ"

    def test_explicit_total_land_price_wins(self):
        merged = merge_property_extraction(
            PropertyRecord(), {"price": "2 tỷ", "tongGiaDat": "2,1 tỷ"}, "x"
        )
        assert merged.tong_gia_dat == "2,1 tỷ"

    def test_keeps_draft_identity_and_code(self):
        draft = PropertyRecord.model_validate({"id": "doc-1", "maBatDongSan": "BDS-ABC123"})
        merged = merge_property_extraction(draft, {}, "x")
        assert merged.id == "doc-1"
        assert merged.ma_bat_dong_san == "BDS-ABC123"

    def test_managed_field_set_excludes_manual_fields(self):
        assert "chiPhiNoiThat" not in PROPERTY_EXTRACTION_FIELDS
        assert "ngayBanGiao" not in PROPERTY_EXTRACTION_FIELDS
        assert "maBatDongSan" not in PROPERTY_EXTRACTION_FIELDS


# ── Customer needs summary ─────────────────────────────────────────────────


class TestSummarizeCustomerNeeds:
    def test_labels_in_field_order_and_skips_absent(self):
        summary = summarize_customer_needs(
            {
                "loaiGiaoDich": "Mua",
                "location": "Quận 7",
                "minPrice": "N/A",
                "maxPrice": "3 tỷ",
                "huongCua": "",
            }
        )
        assert summary == "Nhu cầu: GD: Mua. Vị trí: Quận 7. Giá đến: 3 tỷ."

    def test_nothing_extracted_leaves_only_prefix(self):
        assert summarize_customer_needs({}) == "Nhu cầu:"

    def test_every_needs_field_has_a_label(self):
        summary = summarize_customer_needs({name: "x" for name in CUSTOMER_NEEDS_FIELDS})
        assert summary.count("x.") == len(CUSTOMER_NEEDS_FIELDS)


@pytest.mark.asyncio
async def test_notifier_is_optional(llm):
    with pytest.raises(EmptyInputError):
        await extract_search_criteria(llm, "")
    llm.extract_fields.assert_not_called()
