"""Movement Classifier - SKU stok sağlığı sınıflandırması.

Her SKU, stok miktarı ve hareket tarihlerine göre tam olarak bir duruma atanır:
NEW, NON_MOVING, SLOW_MOVING veya ACTIVE.

Kurallar sıralı bir karar tablosu olarak değerlendirilir; ilk eşleşen kural
kazanır. Sıra değiştirilemez:
    1. NEW          - ilk girişten bu yana slow_moving_days dolmamış
    2. ZERO_STOCK   - stok 0 ise ACTIVE
    3. NON_MOVING
    4. SLOW_MOVING
    5. ACTIVE

Eşiklerin daha önce validate_planning_thresholds ile doğrulandığı varsayılır.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Iterable, Optional

from inventory_engine.engine.threshold_validator import validate_planning_thresholds
from inventory_engine.models.inventory import (
    ClassificationResult,
    DateLike,
    InventoryPosition,
    PlanningThresholds,
    SkuStatus,
    StockHealthSummary,
)


def to_calendar_date(value: DateLike) -> date:
    """Tarihi yerel takvim gününe indirger (saat bilgisi atılır).

    Saat dilimi taşıyan değerler önce yerel saate çevrilir; bugün de yerel
    takvimden alındığı için iki uç aynı saat diliminde karşılaştırılır.
    """
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        value = datetime.fromisoformat(text)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


@dataclass(frozen=True)
class _Facts:
    stock: int
    days_since_first_inward: int
    days_since_last_movement: int
    thresholds: PlanningThresholds


def effective_slow_moving_min_qty(thresholds: PlanningThresholds) -> float:
    # Yüzde modu için bir taban tanımlı değil; mutlak değer geçerli
    return thresholds.slow_moving_min_qty


def effective_non_moving_min_qty(thresholds: PlanningThresholds) -> float:
    return thresholds.non_moving_min_qty


_Rule = Callable[[_Facts], Optional[tuple[SkuStatus, str]]]


def _rule_new(f: _Facts) -> Optional[tuple[SkuStatus, str]]:
    t = f.thresholds
    if f.days_since_first_inward < t.slow_moving_days:
        return (
            SkuStatus.NEW,
            f"Days since first inward: {f.days_since_first_inward} < "
            f"slow_moving_days {t.slow_moving_days}",
        )
    return None


def _rule_zero_stock(f: _Facts) -> Optional[tuple[SkuStatus, str]]:
    if f.stock == 0:
        return SkuStatus.ACTIVE, "Stock: 0 == 0, zero stock is not problem inventory"
    return None


def _rule_non_moving(f: _Facts) -> Optional[tuple[SkuStatus, str]]:
    t = f.thresholds
    min_qty = effective_non_moving_min_qty(t)
    if f.stock >= min_qty and f.days_since_last_movement >= t.non_moving_days:
        return (
            SkuStatus.NON_MOVING,
            f"Stock: {f.stock} >= {min_qty}, "
            f"Days: {f.days_since_last_movement} >= {t.non_moving_days}",
        )
    return None


def _rule_slow_moving(f: _Facts) -> Optional[tuple[SkuStatus, str]]:
    t = f.thresholds
    min_qty = effective_slow_moving_min_qty(t)
    days = f.days_since_last_movement
    if f.stock >= min_qty and t.slow_moving_days <= days < t.non_moving_days:
        return (
            SkuStatus.SLOW_MOVING,
            f"Stock: {f.stock} >= {min_qty}, "
            f"Days: {days} >= {t.slow_moving_days} and < {t.non_moving_days}",
        )
    return None


def _rule_active(f: _Facts) -> Optional[tuple[SkuStatus, str]]:
    t = f.thresholds
    return (
        SkuStatus.ACTIVE,
        f"Stock: {f.stock}, Days: {f.days_since_last_movement} did not meet "
        f"NON_MOVING (>= {effective_non_moving_min_qty(t)} units, >= {t.non_moving_days} days) "
        f"or SLOW_MOVING (>= {effective_slow_moving_min_qty(t)} units, "
        f">= {t.slow_moving_days} days)",
    )


# Sıra yük taşır
CLASSIFICATION_RULES: tuple[_Rule, ...] = (
    _rule_new,
    _rule_zero_stock,
    _rule_non_moving,
    _rule_slow_moving,
    _rule_active,
)


def classify_sku(
    position: InventoryPosition,
    thresholds: PlanningThresholds,
    reference_date: Optional[DateLike] = None,
) -> ClassificationResult:
    """Tek bir SKU'yu sınıflandırır.

    reference_date verilmezse yerel takvime göre bugün kullanılır.
    """
    today = to_calendar_date(reference_date) if reference_date is not None else date.today()
    first_inward = to_calendar_date(position.first_inward_date)
    last_movement = (
        to_calendar_date(position.last_outbound_date)
        if position.last_outbound_date
        else first_inward
    )

    facts = _Facts(
        stock=position.current_stock_qty,
        days_since_first_inward=(today - first_inward).days,
        # Saat kayması veya ileri tarihli kayıtlara karşı 0'a sabitlenir
        days_since_last_movement=max(0, (today - last_movement).days),
        thresholds=thresholds,
    )

    for rule in CLASSIFICATION_RULES:
        matched = rule(facts)
        if matched is not None:
            status, reason = matched
            return ClassificationResult(
                status=status,
                days_since_last_movement=facts.days_since_last_movement,
                reason=reason,
                sku=position.sku,
            )

    # _rule_active her zaman eşleşir
    raise AssertionError("classification rules are not exhaustive")


def classify_skus(
    positions: Iterable[InventoryPosition],
    thresholds: PlanningThresholds,
    reference_date: Optional[DateLike] = None,
) -> list[ClassificationResult]:
    """Bir batch'i aynı referans günüyle sınıflandırır."""
    today = to_calendar_date(reference_date) if reference_date is not None else date.today()
    return [classify_sku(p, thresholds, today) for p in positions]


def summarize_stock_health(
    positions: Iterable[InventoryPosition],
    thresholds: PlanningThresholds,
    reference_date: Optional[DateLike] = None,
) -> StockHealthSummary:
    """Eşikleri doğrular, ardından batch'i sınıflandırıp durum sayılarını çıkarır.

    Eşikler geçersizse sınıflandırma yapılmaz; sonuç sadece validasyon hatalarını taşır.
    """
    validation = validate_planning_thresholds(thresholds)
    counts = {status: 0 for status in SkuStatus}
    if not validation.is_valid:
        return StockHealthSummary(validation=validation, counts=counts)

    results = classify_skus(positions, thresholds, reference_date)
    for result in results:
        counts[result.status] += 1

    return StockHealthSummary(validation=validation, counts=counts, results=results)
