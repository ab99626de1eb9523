from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel


class PropertyRecord(BaseModel):
    """A property listing.

    Every field is an optional string stored under its camelCase document
    name (``maBatDongSan``, ``tongGiaDat``...).  ``id`` is assigned by the
    document store and stays ``None`` until the first save.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    id: str | None = None
    ma_bat_dong_san: str = ""
    chinh_cau: str = ""
    khach_quan_tam: str = ""
    nguoi_tao: str = ""
    nguoi_phu_trach: str = ""
    da_xem_boih: str = ""
    title: str = ""
    location: str = ""
    latitude: str = ""
    longitude: str = ""
    image_link: str = ""
    video_link: str = ""
    area: str = ""
    price: str = ""
    bedrooms: str = ""
    bathrooms: str = ""
    contact: str = ""
    description: str = ""
    loai_nha_dat: str = ""
    loai_giao_dich: str = ""
    loai_hinh_bat_dong_san: str = ""
    nguon_hang: str = ""
    loai_hinh_khac: str = ""
    loai_hinh_kinh_doanh: str = ""
    du_an: str = ""
    bang_hang: str = ""
    giai_doan: str = ""
    khu: str = ""
    so_to: str = ""
    so_thua: str = ""
    toa_do_vn2000: str = Field("", alias="toaDoVN2000")
    don_gia_dat: str = ""
    tong_gia_dat: str = ""
    vat_phan_tram: str = ""
    phi_bao_tri: str = ""
    chi_phi_khac: str = ""
    tong_gia_tri_hop_dong: str = ""
    gia_chot: str = ""
    hoa_hong_phan_tram: str = ""
    tien_hoa_hong: str = ""
    dien_tich_xay_dung: str = ""
    mat_tien: str = ""
    chieu_sau: str = ""
    mat_sau: str = ""
    duong_rong: str = ""
    huong_cua: str = ""
    loai_can: str = ""
    so_tang: str = ""
    vi_tri_tang: str = ""
    chi_phi_noi_that: str = ""
    danh_gia_bds: str = Field("", alias="danhGiaBDS")
    danh_gia_ve_gia: str = ""
    thong_tin_bo_sung: str = ""
    dac_diem_noi_troi: str = ""
    tai_lieu_phap_ly: str = ""
    ngay_ban_giao: str = ""
    nhuoc_diem: str = ""
    tags: str = ""
    nguon_tin: str = ""
    ngay_nhan: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def coerce_to_text(cls, value: Any, info: ValidationInfo) -> Any:
        if info.field_name == "id":
            return value
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def to_document(self) -> dict[str, str]:
        """Document-store payload keyed by wire name, without ``id``."""
        return self.model_dump(by_alias=True, exclude={"id"})

    def get_field(self, wire_name: str) -> str:
        return getattr(self, _WIRE_TO_ATTR[wire_name])

    def updated(self, values: Mapping[str, Any]) -> PropertyRecord:
        """Return a copy with the given wire-name fields replaced."""
        return PropertyRecord.model_validate(
            {**self.model_dump(by_alias=True), **values}
        )


_WIRE_TO_ATTR: dict[str, str] = {
    field.alias or name: name for name, field in PropertyRecord.model_fields.items()
}


class AnalyzeRequest(BaseModel):
    text: str


class ShareLinks(BaseModel):
    zalo: str
    facebook: str
    text: str


class ImportResult(BaseModel):
    imported: int
