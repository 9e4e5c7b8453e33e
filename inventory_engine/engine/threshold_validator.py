"""Planlama eşiği validasyonu.

Sınıflandırıcıya ulaşmadan önce yapısal olarak hatalı eşik setlerini yakalar.
- Tüm kontroller çalışır, ilk hatada durulmaz
- Hata mesajları tanım sırasıyla listelenir
- Exception fırlatmaz, her zaman ValidationResult döner
"""

from __future__ import annotations

from inventory_engine.models.inventory import (
    DEFAULT_PLANNING_THRESHOLDS,
    PlanningThresholds,
    ValidationResult,
)


def get_default_planning_thresholds() -> PlanningThresholds:
    """Henüz ayar kaydı yokken kullanılacak varsayılan eşik seti."""
    return DEFAULT_PLANNING_THRESHOLDS


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_number(errors: list[str], name: str, value) -> bool:
    if _is_number(value):
        return True
    errors.append(f"{name} must be a number (got {value!r})")
    return False


def _check_percentage(
    errors: list[str], name: str, is_percentage: bool, percentage
) -> None:
    if not is_percentage:
        return
    value = percentage if percentage is not None else 0
    if not _check_number(errors, name, value):
        return
    if value < 0 or value > 100:
        errors.append(f"{name} must be between 0 and 100 (got {value})")


def validate_planning_thresholds(thresholds: PlanningThresholds) -> ValidationResult:
    """Eşik setini doğrular.

    Sayı olmayan bir alan kendi sırasında "must be a number" hatası üretir ve o
    alana bağlı karşılaştırmalar atlanır.
    """
    errors: list[str] = []

    slow_ok = _check_number(errors, "slow_moving_days", thresholds.slow_moving_days)
    if slow_ok and thresholds.slow_moving_days <= 0:
        errors.append(
            f"slow_moving_days must be greater than 0 (got {thresholds.slow_moving_days})"
        )

    non_ok = _check_number(errors, "non_moving_days", thresholds.non_moving_days)
    if slow_ok and non_ok and thresholds.non_moving_days <= thresholds.slow_moving_days:
        errors.append(
            f"non_moving_days ({thresholds.non_moving_days}) must be greater than "
            f"slow_moving_days ({thresholds.slow_moving_days})"
        )

    if (
        _check_number(errors, "slow_moving_min_qty", thresholds.slow_moving_min_qty)
        and thresholds.slow_moving_min_qty < 0
    ):
        errors.append(
            "slow_moving_min_qty must be greater than or equal to 0 "
            f"(got {thresholds.slow_moving_min_qty})"
        )

    if (
        _check_number(errors, "non_moving_min_qty", thresholds.non_moving_min_qty)
        and thresholds.non_moving_min_qty < 0
    ):
        errors.append(
            "non_moving_min_qty must be greater than or equal to 0 "
            f"(got {thresholds.non_moving_min_qty})"
        )

    _check_percentage(
        errors,
        "slow_moving_min_qty_percentage",
        thresholds.slow_moving_min_qty_is_percentage,
        thresholds.slow_moving_min_qty_percentage,
    )
    _check_percentage(
        errors,
        "non_moving_min_qty_percentage",
        thresholds.non_moving_min_qty_is_percentage,
        thresholds.non_moving_min_qty_percentage,
    )

    return ValidationResult(is_valid=len(errors) == 0, errors=errors)
