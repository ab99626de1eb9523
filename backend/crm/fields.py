"""Declarative field tables shared by extraction, filtering and spreadsheets.

Field names here are the document (wire) names, i.e. the keys stored in the
document store and used as spreadsheet column headers on export.  Each
property field also carries the Vietnamese column labels accepted on import.
"""

from __future__ import annotations

from typing import NamedTuple

EMPTY_PLACEHOLDER = "N/A"

PROPERTY_CODE_PREFIX = "BDS-"


class FieldSpec(NamedTuple):
    name: str
    labels: tuple[str, ...]


# Order matches the property form and the exported column order.
PROPERTY_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("maBatDongSan", ("Mã BĐS",)),
    FieldSpec("chinhCau", ("Chính chủ",)),
    FieldSpec("khachQuanTam", ("Khách quan tâm",)),
    FieldSpec("nguoiTao", ("Người tạo",)),
    FieldSpec("nguoiPhuTrach", ("Người phụ trách",)),
    FieldSpec("daXemBoih", ("Đã xem bởi",)),
    FieldSpec("title", ("Tiêu đề",)),
    FieldSpec("location", ("Vị trí",)),
    FieldSpec("latitude", ("Vĩ độ",)),
    FieldSpec("longitude", ("Kinh độ",)),
    FieldSpec("imageLink", ("Link ảnh",)),
    FieldSpec("videoLink", ("Link video",)),
    FieldSpec("area", ("Diện tích đất",)),
    FieldSpec("price", ("Giá", "Tổng giá đất")),
    FieldSpec("bedrooms", ("Số phòng ngủ",)),
    FieldSpec("bathrooms", ("Số phòng tắm",)),
    FieldSpec("contact", ("Liên hệ",)),
    FieldSpec("description", ("Mô tả chi tiết",)),
    FieldSpec("loaiNhaDat", ("Loại nhà đất",)),
    FieldSpec("loaiGiaoDich", ("Loại giao dịch",)),
    FieldSpec("loaiHinhBatDongSan", ("Loại hình BĐS",)),
    FieldSpec("nguonHang", ("Nguồn hàng",)),
    FieldSpec("loaiHinhKhac", ("Loại hình khác",)),
    FieldSpec("loaiHinhKinhDoanh", ("Loại hình kinh doanh",)),
    FieldSpec("duAn", ("Dự án",)),
    FieldSpec("bangHang", ("Bảng hàng",)),
    FieldSpec("giaiDoan", ("Giai đoạn",)),
    FieldSpec("khu", ("Khu",)),
    FieldSpec("soTo", ("Số tờ",)),
    FieldSpec("soThua", ("Số thửa",)),
    FieldSpec("toaDoVN2000", ("Tọa độ VN 2000",)),
    FieldSpec("donGiaDat", ("Đơn giá đất",)),
    FieldSpec("tongGiaDat", ("Tổng giá đất",)),
    FieldSpec("vatPhanTram", ("%VAT",)),
    FieldSpec("phiBaoTri", ("Phí bảo trì",)),
    FieldSpec("chiPhiKhac", ("Chi phí khác",)),
    FieldSpec("tongGiaTriHopDong", ("Tổng giá trị hợp đồng",)),
    FieldSpec("giaChot", ("Giá chốt",)),
    FieldSpec("hoaHongPhanTram", ("%Hoa hồng",)),
    FieldSpec("tienHoaHong", ("Tiền hoa hồng",)),
    FieldSpec("dienTichXayDung", ("Diện tích xây dựng",)),
    FieldSpec("matTien", ("Mặt tiền",)),
    FieldSpec("chieuSau", ("Chiều sâu",)),
    FieldSpec("matSau", ("Mặt sau",)),
    FieldSpec("duongRong", ("Đường rộng",)),
    FieldSpec("huongCua", ("Hướng cửa",)),
    FieldSpec("loaiCan", ("Loại căn",)),
    FieldSpec("soTang", ("Số tầng",)),
    FieldSpec("viTriTang", ("Vị trí tầng",)),
    FieldSpec("chiPhiNoiThat", ("Chi phí nội thất",)),
    FieldSpec("danhGiaBDS", ("Đánh giá BĐS",)),
    FieldSpec("danhGiaVeGia", ("Đánh giá về giá",)),
    FieldSpec("thongTinBoSung", ("Thông tin bổ sung",)),
    FieldSpec("dacDiemNoiTroi", ("Đặc điểm nổi trội",)),
    FieldSpec("taiLieuPhapLy", ("Tài liệu pháp lý",)),
    FieldSpec("ngayBanGiao", ("Ngày bàn giao",)),
    FieldSpec("nhuocDiem", ("Nhược điểm",)),
    FieldSpec("tags", ("Tags",)),
    FieldSpec("nguonTin", ("Nguồn tin",)),
    FieldSpec("ngayNhan", ("Ngày nhận",)),
)

PROPERTY_FIELD_NAMES: tuple[str, ...] = tuple(f.name for f in PROPERTY_FIELDS)
PROPERTY_LABELS: dict[str, tuple[str, ...]] = {f.name: f.labels for f in PROPERTY_FIELDS}

# The AI-managed subset of property fields.  A successful extraction
# overwrites all of these and nothing else.
PROPERTY_EXTRACTION_FIELDS: tuple[str, ...] = (
    "chinhCau",
    "title",
    "location",
    "latitude",
    "longitude",
    "imageLink",
    "videoLink",
    "area",
    "price",
    "bedrooms",
    "bathrooms",
    "contact",
    "loaiNhaDat",
    "loaiGiaoDich",
    "loaiHinhBatDongSan",
    "nguonHang",
    "loaiHinhKhac",
    "duAn",
    "soTo",
    "soThua",
    "donGiaDat",
    "tongGiaDat",
    "matTien",
    "chieuSau",
    "matSau",
    "duongRong",
    "huongCua",
    "loaiCan",
    "soTang",
    "viTriTang",
    "danhGiaBDS",
    "danhGiaVeGia",
    "dacDiemNoiTroi",
    "taiLieuPhapLy",
    "nhuocDiem",
    "tags",
    "dienTichXayDung",
)

CUSTOMER_NEEDS_FIELDS: tuple[str, ...] = (
    "loaiGiaoDich",
    "loaiHinhBatDongSan",
    "location",
    "minPrice",
    "maxPrice",
    "minBedrooms",
    "maxBedrooms",
    "areaKeyword",
    "huongCua",
)

SEARCH_FIELDS: tuple[str, ...] = (
    "location",
    "minPrice",
    "maxPrice",
    "minBedrooms",
    "maxBedrooms",
    "areaKeyword",
    "huongCua",
    "loaiNhaDat",
    "loaiGiaoDich",
    "loaiHinhBatDongSan",
    "duAn",
)

# Hints for criteria fields that are not property columns.
CRITERIA_HINTS: dict[str, str] = {
    "location": "desired location",
    "minPrice": "minimum price",
    "maxPrice": "maximum price",
    "minBedrooms": "minimum number of bedrooms",
    "maxBedrooms": "maximum number of bedrooms",
    "areaKeyword": "size keyword such as 'nhỏ' (small), 'lớn' (large) or 'rộng' (spacious)",
    "huongCua": "desired door orientation",
    "loaiNhaDat": "land/house type",
    "loaiGiaoDich": "transaction type: 'mua bán' (sale) or 'cho thuê' (rent)",
    "loaiHinhBatDongSan": "property category: nhà, đất nền, căn hộ, ...",
    "duAn": "project name",
}

NEEDS_SUMMARY_PREFIX = "Nhu cầu:"

NEEDS_SUMMARY_LABELS: dict[str, str] = {
    "loaiGiaoDich": "GD",
    "loaiHinhBatDongSan": "Loại",
    "location": "Vị trí",
    "minPrice": "Giá từ",
    "maxPrice": "Giá đến",
    "minBedrooms": "PN từ",
    "maxBedrooms": "PN đến",
    "areaKeyword": "DT",
    "huongCua": "Hướng",
}

KEYWORD_FALLBACK_FIELDS: tuple[str, ...] = (
    "title",
    "description",
    "location",
    "maBatDongSan",
    "nguonHang",
    "loaiHinhKhac",
    "duAn",
    "tags",
)
