"""Teslim alma düzeltmeleri için validasyon.

Kalem üzerinde yapılacak düzeltmelerin (reddedilene taşıma, eksik güncelleme)
sayım tutarlılığını bozmadan yapılıp yapılamayacağını kontrol eder.
- received sabittir, hiçbir düzeltme onu değiştirmez
- Teslim alınandan reddedilene taşıma stoktan düşer
- Eksikten reddedilene taşıma stoğu değiştirmez (eksik hiç stoğa girmedi)
- Eksik azalırsa stok artar, eksik artarsa stok azalır

Kayıt güncellemesi çağırana aittir; burada sadece plan ve sonuç üretilir.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from inventory_engine.engine.quantity_reconciler import (
    QuantitySource,
    line_item_quantities,
    reconcile_quantities,
)
from inventory_engine.models.inventory import ValidationResult


class ReceivingValidator:
    """Teslim alma kalemi düzeltmelerinin doğrulayıcısı."""

    def validate_move_to_rejected(
        self, item: QuantitySource, quantity: Optional[int] = None
    ) -> ValidationResult:
        """Teslim alınan birimlerin bir kısmını (kusurlu) reddedilene taşır.

        quantity verilmezse kullanılabilir miktarın tamamı taşınır.
        """
        q = line_item_quantities(item)
        errors = []

        available_qty = q.received - q.rejected
        move_qty = quantity if quantity is not None else available_qty

        if available_qty <= 0:
            errors.append("No available quantity to move to rejected")
        elif move_qty <= 0:
            errors.append(f"Move quantity must be positive: {move_qty}")
        elif move_qty > available_qty:
            errors.append(
                f"Cannot move {move_qty} to rejected. Only {available_qty} available "
                f"(received: {q.received} - rejected: {q.rejected})."
            )

        details = {}
        if not errors:
            details = {
                "move_quantity": move_qty,
                "new_rejected": q.rejected + move_qty,
                "stock_change": -move_qty,
            }
        return ValidationResult(is_valid=len(errors) == 0, errors=errors, details=details)

    def validate_short_to_rejected(
        self, item: QuantitySource, quantity: Optional[int] = None
    ) -> ValidationResult:
        """Eksik birimleri reddedilene taşır; eksik alanı değişmez."""
        q = line_item_quantities(item)
        errors = []

        move_qty = quantity if quantity is not None else q.short

        if q.short <= 0:
            errors.append("No short quantity to move to rejected")
        elif move_qty <= 0:
            errors.append(f"Move quantity must be positive: {move_qty}")
        elif move_qty > q.short:
            errors.append(
                f"Cannot move {move_qty} to rejected. Only {q.short} available in short."
            )

        details = {}
        if not errors:
            details = {
                "move_quantity": move_qty,
                "new_rejected": q.rejected + move_qty,
                "stock_change": 0,
            }
        return ValidationResult(is_valid=len(errors) == 0, errors=errors, details=details)

    def validate_short_update(self, item: QuantitySource, new_short: int) -> ValidationResult:
        """Eksik miktarının yeni değerini doğrular ve stok etkisini hesaplar."""
        q = line_item_quantities(item)
        errors = []
        details = {}

        if new_short < 0:
            errors.append("Short quantity cannot be negative")
        else:
            updated = replace(q, short=new_short)
            reconciled = reconcile_quantities(updated)
            if reconciled.available < 0:
                errors.append(
                    f"Invalid quantities: Available ({reconciled.available}) = "
                    f"Received ({q.received}) - Rejected ({q.rejected}) + "
                    f"Arrived Short ({reconciled.arrived_short}) cannot be negative"
                )
            else:
                details = {
                    "new_short": new_short,
                    "available": reconciled.available,
                    "arrived_short": reconciled.arrived_short,
                    "stock_change": q.short - new_short,
                }

        return ValidationResult(is_valid=len(errors) == 0, errors=errors, details=details)
