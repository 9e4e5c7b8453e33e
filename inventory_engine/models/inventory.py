"""Stok hareket motoru veri modelleri."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, Optional, Union

DateLike = Union[date, datetime, str]


class SkuStatus(str, Enum):
    NEW = "NEW"
    NON_MOVING = "NON_MOVING"
    SLOW_MOVING = "SLOW_MOVING"
    ACTIVE = "ACTIVE"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ReceivingStatus(str, Enum):
    PENDING = "Pending"
    COMPLETE = "Complete"


@dataclass
class InventoryPosition:
    current_stock_qty: int
    first_inward_date: DateLike
    last_outbound_date: Optional[DateLike] = None
    sku: Optional[str] = None


# Ayar kayıtları hem snake_case hem camelCase gelebilir
_THRESHOLD_KEYS: dict[str, tuple[str, ...]] = {
    "slow_moving_days": ("slow_moving_days", "slowMovingDays"),
    "slow_moving_min_qty": ("slow_moving_min_qty", "slowMovingMinQty"),
    "slow_moving_min_qty_is_percentage": (
        "slow_moving_min_qty_is_percentage",
        "slowMovingMinQtyIsPercentage",
    ),
    "slow_moving_min_qty_percentage": (
        "slow_moving_min_qty_percentage",
        "slowMovingMinQtyPercentage",
    ),
    "non_moving_days": ("non_moving_days", "nonMovingDays"),
    "non_moving_min_qty": ("non_moving_min_qty", "nonMovingMinQty"),
    "non_moving_min_qty_is_percentage": (
        "non_moving_min_qty_is_percentage",
        "nonMovingMinQtyIsPercentage",
    ),
    "non_moving_min_qty_percentage": (
        "non_moving_min_qty_percentage",
        "nonMovingMinQtyPercentage",
    ),
}


@dataclass(frozen=True)
class PlanningThresholds:
    """Sınıflandırma eşikleri. Bir batch boyunca salt-okunur paylaşılır."""

    slow_moving_days: int = 90
    slow_moving_min_qty: float = 5
    slow_moving_min_qty_is_percentage: bool = False
    slow_moving_min_qty_percentage: Optional[float] = 0
    non_moving_days: int = 180
    non_moving_min_qty: float = 1
    non_moving_min_qty_is_percentage: bool = False
    non_moving_min_qty_percentage: Optional[float] = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PlanningThresholds":
        """Ayar sözlüğünden eşik seti oluşturur; eksik alanlar varsayılanı alır."""
        kwargs: dict[str, Any] = {}
        for attr, names in _THRESHOLD_KEYS.items():
            for name in names:
                if name in data and data[name] is not None:
                    kwargs[attr] = data[name]
                    break
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {attr: getattr(self, attr) for attr in _THRESHOLD_KEYS}


DEFAULT_PLANNING_THRESHOLDS = PlanningThresholds()


@dataclass(frozen=True)
class ClassificationResult:
    status: SkuStatus
    days_since_last_movement: int
    reason: str
    sku: Optional[str] = None


@dataclass
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    details: dict = field(default_factory=dict)

    @property
    def valid(self) -> bool:
        return self.is_valid


@dataclass
class StockHealthSummary:
    validation: ValidationResult
    counts: dict[SkuStatus, int] = field(default_factory=dict)
    results: list[ClassificationResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)


@dataclass(frozen=True)
class LineItemQuantities:
    total_quantity: int = 0
    received: int = 0
    rejected: int = 0
    short: int = 0


@dataclass(frozen=True)
class QuantityReconciliation:
    available: int
    initial_short: int
    arrived_short: int


@dataclass(frozen=True)
class ReceivingSummary:
    item_count: int
    total_quantity: int
    received: int
    rejected: int
    short: int
    available: int
    status: ReceivingStatus


@dataclass(frozen=True)
class SortSpec:
    field: str
    direction: SortDirection = SortDirection.ASC


@dataclass(frozen=True)
class ProjectedRow:
    """Bir (kayıt, kalem) çifti için düzleştirilmiş satır.

    row_key "{record_id}-{item_id}" biçimindedir. Kimliği olmayan kalemler ve
    kalemsiz kaydın yer tutucu satırı item_id=0 alır; aynı kayıtta bunların
    anahtarları çakışır. Tekil anahtar gereken çağıranlar kalem kimliği vermelidir.
    """

    row_key: str
    record_id: Any
    item_id: Any
    invoice_number: str
    invoice_date: str
    receiving_date: str
    vendor_name: str
    brand_name: str
    item_name: str
    sku_label: str
    challan_number: str
    quantities: LineItemQuantities
    reconciliation: QuantityReconciliation
    is_placeholder: bool = False
    record: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)
    item: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def available(self) -> int:
        return self.reconciliation.available
