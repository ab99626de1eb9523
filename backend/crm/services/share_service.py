from __future__ import annotations

from urllib.parse import quote

from crm.schemas.property import PropertyRecord, ShareLinks

ZALO_SHARE_URL = "https://chat.zalo.me/"
FACEBOOK_SHARE_URL = "https://www.facebook.com/sharer/sharer.php"
SHARE_DESCRIPTION_CHARS = 150


def build_share_text(prop: PropertyRecord) -> str:
    price = prop.price or prop.tong_gia_dat
    description = prop.description[:SHARE_DESCRIPTION_CHARS]
    return f"{prop.title} - {prop.location}. Giá: {price}. Mô tả: {description}..."


def build_share_links(prop: PropertyRecord, page_url: str) -> ShareLinks:
    text = build_share_text(prop)
    url = quote(page_url, safe="")
    encoded_text = quote(text, safe="")
    return ShareLinks(
        zalo=f"{ZALO_SHARE_URL}?url={url}&text={encoded_text}",
        facebook=f"{FACEBOOK_SHARE_URL}?u={url}&quote={encoded_text}",
        text=text,
    )
