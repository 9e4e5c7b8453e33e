"""Quantity Reconciler - teslimat kalemi için geçerli (available) miktar hesabı.

Gelen sayımlar (sipariş, teslim alınan, reddedilen, eksik) birbirinden bağımsız
girilir ve tutarlı olmaları garanti değildir. Formül:

    initial_short = total_quantity - received
    arrived_short = max(0, initial_short - short)
    available     = received - rejected + arrived_short   (rejected > 0)
                    received + arrived_short              (aksi halde)

Girdi doğrulaması yapılmaz, sonuç kırpılmaz; saf aritmetiktir.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Union

from inventory_engine.engine.record_fields import as_number, resolve_item
from inventory_engine.models.inventory import (
    LineItemQuantities,
    QuantityReconciliation,
    ReceivingStatus,
    ReceivingSummary,
)

QuantitySource = Union[LineItemQuantities, Mapping[str, Any]]


def line_item_quantities(item: QuantitySource) -> LineItemQuantities:
    """Ham kalem kaydını (iki isimlendirme de olur) sayım setine çevirir."""
    if isinstance(item, LineItemQuantities):
        return item
    return LineItemQuantities(
        total_quantity=as_number(resolve_item(item, "total_quantity")),
        received=as_number(resolve_item(item, "received")),
        rejected=as_number(resolve_item(item, "rejected")),
        short=as_number(resolve_item(item, "short")),
    )


def reconcile_quantities(item: QuantitySource) -> QuantityReconciliation:
    q = line_item_quantities(item)

    initial_short = q.total_quantity - q.received
    arrived_short = max(0, initial_short - q.short)
    if q.rejected > 0:
        available = q.received - q.rejected + arrived_short
    else:
        available = q.received + arrived_short

    return QuantityReconciliation(
        available=available,
        initial_short=initial_short,
        arrived_short=arrived_short,
    )


def summarize_record_receiving(items: Iterable[QuantitySource]) -> ReceivingSummary:
    """Bir teslimat kaydının kalemlerini toplar.

    Toplam eksik > 0 ise kayıt hâlâ bekliyor (Pending), değilse tamamlanmış sayılır.
    """
    count = 0
    total_quantity = received = rejected = short = available = 0
    for item in items:
        q = line_item_quantities(item)
        count += 1
        total_quantity += q.total_quantity
        received += q.received
        rejected += q.rejected
        short += q.short
        available += reconcile_quantities(q).available

    return ReceivingSummary(
        item_count=count,
        total_quantity=total_quantity,
        received=received,
        rejected=rejected,
        short=short,
        available=available,
        status=ReceivingStatus.PENDING if short > 0 else ReceivingStatus.COMPLETE,
    )
