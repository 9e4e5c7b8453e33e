"""Record Projector - iç içe sevkiyat/kalem verisini düz satırlara dönüştürür.

Akış: düzleştir -> (varsa) sırala -> (varsa) ara.
- Kalemleri yüklenmiş her kayıt için kalem başına bir satır
- Kalemleri henüz yüklenmemiş kayıt için tek bir yer tutucu satır (item id 0)
- Sıralama tek anahtarlı ve kararlıdır; eşitler geliş sırasını korur
- Arama sabit alan listesinde büyük/küçük harf duyarsız alt-dizgi eşleşmesidir
"""

from __future__ import annotations

import locale
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from inventory_engine.engine.quantity_reconciler import reconcile_quantities
from inventory_engine.engine.record_fields import (
    as_number,
    as_text,
    resolve_item,
    resolve_record,
    resolve_sku_label,
)
from inventory_engine.models.inventory import (
    LineItemQuantities,
    ProjectedRow,
    SortDirection,
    SortSpec,
)

PLACEHOLDER_ITEM_ID = 0

Record = Mapping[str, Any]


# --- Düzleştirme ---


def _lookup_items(
    line_items_by_record_id: Mapping[Any, Sequence[Record]], record_id: Any
) -> Sequence[Record]:
    items = line_items_by_record_id.get(record_id)
    if items is None and record_id is not None:
        # JSON kaynaklı sözlüklerde anahtarlar string olur
        items = line_items_by_record_id.get(str(record_id))
    return items or []


def _build_row(
    record: Record,
    item: Record,
    item_id: Any,
    quantities: LineItemQuantities,
    is_placeholder: bool,
) -> ProjectedRow:
    record_id = resolve_record(record, "id")
    return ProjectedRow(
        row_key=f"{record_id}-{item_id}",
        record_id=record_id,
        item_id=item_id,
        invoice_number=as_text(resolve_record(record, "invoice_number")),
        invoice_date=as_text(resolve_record(record, "invoice_date")),
        receiving_date=as_text(resolve_record(record, "receiving_date")),
        vendor_name=as_text(resolve_record(record, "vendor_name")),
        brand_name=as_text(resolve_record(record, "brand_name")),
        item_name=as_text(resolve_item(item, "item_name")),
        sku_label=resolve_sku_label(item),
        challan_number=as_text(resolve_item(item, "challan_number")),
        quantities=quantities,
        reconciliation=reconcile_quantities(quantities),
        is_placeholder=is_placeholder,
        record=record,
        item=item,
    )


def _item_row(record: Record, item: Record) -> ProjectedRow:
    item_id = resolve_item(item, "item_id", PLACEHOLDER_ITEM_ID)
    quantities = LineItemQuantities(
        total_quantity=as_number(resolve_item(item, "total_quantity")),
        received=as_number(resolve_item(item, "received")),
        rejected=as_number(resolve_item(item, "rejected")),
        short=as_number(resolve_item(item, "short")),
    )
    return _build_row(record, item, item_id, quantities, is_placeholder=False)


def _placeholder_row(record: Record) -> ProjectedRow:
    # Kalemler yüklenene kadar kayıt seviyesindeki toplamlar gösterilir
    quantities = LineItemQuantities(
        total_quantity=as_number(resolve_record(record, "total_quantity")),
        received=as_number(resolve_record(record, "received")),
        rejected=as_number(resolve_record(record, "rejected")),
        short=as_number(resolve_record(record, "short")),
    )
    return _build_row(record, {}, PLACEHOLDER_ITEM_ID, quantities, is_placeholder=True)


def flatten_records(
    records: Iterable[Record],
    line_items_by_record_id: Mapping[Any, Sequence[Record]],
) -> list[ProjectedRow]:
    rows: list[ProjectedRow] = []
    for record in records:
        items = _lookup_items(line_items_by_record_id, resolve_record(record, "id"))
        if items:
            rows.extend(_item_row(record, item) for item in items)
        else:
            rows.append(_placeholder_row(record))
    return rows


# --- Sıralama ---


def _timestamp(value: str) -> float:
    """Tarih metnini epoch saniyesine çevirir; boş veya okunamayan değer 0."""
    if not value:
        return 0.0
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return 0.0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def _date_key(getter: Callable[[ProjectedRow], str]) -> Callable[[ProjectedRow], Any]:
    return lambda row: _timestamp(getter(row))


def _text_key(getter: Callable[[ProjectedRow], str]) -> Callable[[ProjectedRow], Any]:
    return lambda row: locale.strxfrm(getter(row).lower())


def _number_key(getter: Callable[[ProjectedRow], Any]) -> Callable[[ProjectedRow], Any]:
    return getter


SORT_KEYS: dict[str, Callable[[ProjectedRow], Any]] = {
    "invoiceDate": _date_key(lambda r: r.invoice_date),
    "receivingDate": _date_key(lambda r: r.receiving_date),
    "itemName": _text_key(lambda r: r.item_name),
    "vendor": _text_key(lambda r: r.vendor_name),
    "totalQuantity": _number_key(lambda r: r.quantities.total_quantity),
    "available": _number_key(lambda r: r.reconciliation.available),
    "rejected": _number_key(lambda r: r.quantities.rejected),
    "short": _number_key(lambda r: r.quantities.short),
}

SORT_FIELD_ALIASES: dict[str, str] = {
    "invoice_date": "invoiceDate",
    "receiving_date": "receivingDate",
    "item_name": "itemName",
    "vendorName": "vendor",
    "vendor_name": "vendor",
    "total_quantity": "totalQuantity",
}


def _sort_direction(direction: Any) -> Optional[SortDirection]:
    if isinstance(direction, SortDirection):
        return direction
    try:
        return SortDirection(str(direction).lower())
    except ValueError:
        return None


def sort_rows(rows: Sequence[ProjectedRow], sort_spec: Optional[SortSpec]) -> list[ProjectedRow]:
    """Satırları tek anahtara göre sıralar. Tanınmayan alan sırayı değiştirmez."""
    if sort_spec is None or not sort_spec.field:
        return list(rows)

    field_name = SORT_FIELD_ALIASES.get(sort_spec.field, sort_spec.field)
    key = SORT_KEYS.get(field_name)
    direction = _sort_direction(sort_spec.direction)
    if key is None or direction is None:
        return list(rows)

    # sorted() kararlıdır; reverse=True eşitlerin sırasını bozmaz
    return sorted(rows, key=key, reverse=direction == SortDirection.DESC)


# --- Arama ---


def searchable_fields(row: ProjectedRow) -> tuple[str, ...]:
    return (
        row.invoice_number,
        row.invoice_date,
        row.receiving_date,
        row.item_name,
        row.sku_label,
        row.vendor_name,
        row.brand_name,
        row.challan_number,
    )


def search_rows(rows: Sequence[ProjectedRow], search_term: Optional[str]) -> list[ProjectedRow]:
    if not search_term or not search_term.strip():
        return list(rows)

    needle = search_term.strip().lower()
    return [
        row
        for row in rows
        if any(needle in value.lower() for value in searchable_fields(row))
    ]


def project_records(
    records: Iterable[Record],
    line_items_by_record_id: Mapping[Any, Sequence[Record]],
    sort_spec: Optional[SortSpec] = None,
    search_term: Optional[str] = None,
) -> list[ProjectedRow]:
    """Kayıtları düzleştirir, sıralar ve arama filtresini uygular."""
    rows = flatten_records(records, line_items_by_record_id)
    rows = sort_rows(rows, sort_spec)
    return search_rows(rows, search_term)
