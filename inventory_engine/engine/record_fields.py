"""Kayıt alanı çözümleme.

Sevkiyat kayıtları iki farklı isimlendirme ile gelebilir: güncel (camelCase) ve
eski (snake_case). Alan okuma tek noktada yapılır: önce A adı, sonra B adı,
yoksa varsayılan. Boş string ve None "yok" sayılır.
"""

from __future__ import annotations

from typing import Any, Mapping

# Mantıksal alan -> kabul edilen anahtarlar (öncelik sırasıyla)
RECORD_FIELDS: dict[str, tuple[str, ...]] = {
    "id": ("id", "recordId", "record_id"),
    "invoice_number": ("invoiceNumber", "invoice_number"),
    "invoice_date": ("invoiceDate", "invoice_date"),
    "receiving_date": ("receivingDate", "receiving_date"),
    "vendor_name": ("vendorName", "vendor_name"),
    "brand_name": ("brandName", "brand_name"),
    "total_quantity": ("totalQuantity", "total_quantity"),
    "received": ("received", "receivedQuantity", "received_quantity"),
    "rejected": ("rejected", "totalRejected", "total_rejected"),
    "short": ("short", "totalShort", "total_short"),
}

ITEM_FIELDS: dict[str, tuple[str, ...]] = {
    "item_id": ("itemId", "item_id", "id"),
    "item_name": ("itemName", "item_name"),
    "sku_id": ("skuId", "sku_id"),
    "sku_code": ("skuCode", "sku_code"),
    "challan_number": ("challanNumber", "challan_number", "docketNumber", "docket_number"),
    "total_quantity": ("totalQuantity", "total_quantity"),
    "received": ("received",),
    "rejected": ("rejected",),
    "short": ("short",),
}


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def resolve(raw: Mapping[str, Any], names: tuple[str, ...], default: Any = None) -> Any:
    """İlk dolu anahtarın değerini döndürür."""
    for name in names:
        value = raw.get(name)
        if not _is_missing(value):
            return value
    return default


def resolve_record(raw: Mapping[str, Any], field_name: str, default: Any = None) -> Any:
    return resolve(raw, RECORD_FIELDS[field_name], default)


def resolve_item(raw: Mapping[str, Any], field_name: str, default: Any = None) -> Any:
    return resolve(raw, ITEM_FIELDS[field_name], default)


def as_text(value: Any) -> str:
    if _is_missing(value):
        return ""
    return str(value)


def as_number(value: Any) -> int | float:
    """Sayısal alanı okur; okunamayan değerler 0 olur."""
    if isinstance(value, bool) or _is_missing(value):
        return 0
    if isinstance(value, (int, float)):
        return value
    try:
        number = float(str(value).strip())
    except ValueError:
        return 0
    return int(number) if number.is_integer() else number


def resolve_sku_label(item: Mapping[str, Any]) -> str:
    """SKU etiketi: sayısal id varsa o, yoksa SKU kodu."""
    sku_id = resolve_item(item, "sku_id")
    if sku_id is not None:
        return str(sku_id)
    return as_text(resolve_item(item, "sku_code"))
