"""Movement Classifier unit testleri."""

import time
from dataclasses import replace
from datetime import date, datetime, timedelta, timezone

import pytest

from inventory_engine.engine.movement_classifier import (
    CLASSIFICATION_RULES,
    classify_sku,
    classify_skus,
    summarize_stock_health,
    to_calendar_date,
)
from inventory_engine.models.inventory import (
    DEFAULT_PLANNING_THRESHOLDS,
    InventoryPosition,
    SkuStatus,
)

TODAY = date(2025, 6, 1)


@pytest.fixture
def tokyo_time(monkeypatch):
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset bu platformda yok")
    monkeypatch.setenv("TZ", "Asia/Tokyo")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


def _days_ago(days: int) -> date:
    return TODAY - timedelta(days=days)


def _position(stock: int, first_inward_days: int, last_outbound_days=None, sku="SKU001"):
    return InventoryPosition(
        current_stock_qty=stock,
        first_inward_date=_days_ago(first_inward_days),
        last_outbound_date=_days_ago(last_outbound_days) if last_outbound_days is not None else None,
        sku=sku,
    )


class TestNewOverride:
    """Yeni ürün kuralının diğer kurallardan önce gelmesi testleri."""

    def test_recent_inward_is_new_regardless_of_stock(self):
        for stock in (0, 1, 10, 10_000):
            result = classify_sku(_position(stock, 30), DEFAULT_PLANNING_THRESHOLDS, TODAY)
            assert result.status == SkuStatus.NEW

    def test_new_even_without_any_outbound(self):
        result = classify_sku(_position(500, 89), DEFAULT_PLANNING_THRESHOLDS, TODAY)
        assert result.status == SkuStatus.NEW
        assert result.days_since_last_movement == 89

    def test_new_boundary(self):
        """slow_moving_days gününde artık NEW değildir."""
        result = classify_sku(_position(10, 90), DEFAULT_PLANNING_THRESHOLDS, TODAY)
        assert result.status == SkuStatus.SLOW_MOVING


class TestZeroStock:
    """Sıfır stoklu SKU testleri."""

    def test_zero_stock_is_active(self):
        result = classify_sku(_position(0, 400), DEFAULT_PLANNING_THRESHOLDS, TODAY)
        assert result.status == SkuStatus.ACTIVE
        assert "0" in result.reason


class TestNonMoving:
    """NON_MOVING sınıflandırma testleri."""

    def test_no_outbound_uses_first_inward(self):
        """200 gün önce giriş, hiç çıkış yok, stok 10 -> NON_MOVING."""
        result = classify_sku(_position(10, 200), DEFAULT_PLANNING_THRESHOLDS, TODAY)
        assert result.status == SkuStatus.NON_MOVING
        assert result.days_since_last_movement == 200
        assert "10 >= 1" in result.reason
        assert "200 >= 180" in result.reason

    def test_non_moving_boundary(self):
        result = classify_sku(_position(1, 365, 180), DEFAULT_PLANNING_THRESHOLDS, TODAY)
        assert result.status == SkuStatus.NON_MOVING

    def test_below_non_moving_min_qty_falls_through(self):
        thresholds = replace(DEFAULT_PLANNING_THRESHOLDS, non_moving_min_qty=50)
        result = classify_sku(_position(10, 200), thresholds, TODAY)
        assert result.status == SkuStatus.ACTIVE


class TestSlowMoving:
    """SLOW_MOVING sınıflandırma testleri."""

    def test_slow_moving_band(self):
        """Son çıkış 100 gün önce, stok 10 -> SLOW_MOVING."""
        result = classify_sku(_position(10, 300, 100), DEFAULT_PLANNING_THRESHOLDS, TODAY)
        assert result.status == SkuStatus.SLOW_MOVING
        assert result.days_since_last_movement == 100
        assert "100 >= 90 and < 180" in result.reason

    def test_below_slow_moving_min_qty_is_active(self):
        result = classify_sku(_position(4, 300, 100), DEFAULT_PLANNING_THRESHOLDS, TODAY)
        assert result.status == SkuStatus.ACTIVE

    def test_recent_movement_is_active(self):
        result = classify_sku(_position(10, 300, 10), DEFAULT_PLANNING_THRESHOLDS, TODAY)
        assert result.status == SkuStatus.ACTIVE
        assert result.days_since_last_movement == 10


class TestPercentageThresholds:
    """Yüzde modundaki minimum miktar testleri."""

    def test_percentage_mode_keeps_absolute_min_qty(self):
        thresholds = replace(
            DEFAULT_PLANNING_THRESHOLDS,
            non_moving_min_qty_is_percentage=True,
            non_moving_min_qty_percentage=90,
        )
        result = classify_sku(_position(10, 200), thresholds, TODAY)
        assert result.status == SkuStatus.NON_MOVING


class TestDates:
    """Tarih dönüştürme ve gün hesabı testleri."""

    def test_future_outbound_clamped_to_zero(self):
        position = InventoryPosition(
            current_stock_qty=10,
            first_inward_date=_days_ago(300),
            last_outbound_date=TODAY + timedelta(days=5),
        )
        result = classify_sku(position, DEFAULT_PLANNING_THRESHOLDS, TODAY)
        assert result.days_since_last_movement == 0
        assert result.status == SkuStatus.ACTIVE

    def test_time_of_day_is_ignored(self):
        position = InventoryPosition(
            current_stock_qty=10,
            first_inward_date="2024-11-13T23:59:59",
            last_outbound_date=None,
        )
        result = classify_sku(position, DEFAULT_PLANNING_THRESHOLDS, datetime(2025, 6, 1, 0, 1))
        assert result.days_since_last_movement == 200

    def test_iso_string_with_z_suffix(self):
        assert to_calendar_date("2025-01-02T12:00:00Z") == date(2025, 1, 2)
        assert to_calendar_date("2025-01-02") == date(2025, 1, 2)

    def test_offset_timestamp_uses_local_calendar_day(self, tokyo_time):
        """UTC akşamı Tokyo'da ertesi gündür; gün farkı yerel takvimle hesaplanır."""
        assert to_calendar_date("2025-01-01T20:00:00Z") == date(2025, 1, 2)
        assert to_calendar_date(datetime(2025, 1, 1, 20, tzinfo=timezone.utc)) == date(2025, 1, 2)
        assert to_calendar_date(datetime(2025, 1, 1, 20)) == date(2025, 1, 1)

        position = InventoryPosition(current_stock_qty=10, first_inward_date="2025-01-01T20:00:00Z")
        result = classify_sku(position, DEFAULT_PLANNING_THRESHOLDS, date(2025, 4, 1))
        assert result.days_since_last_movement == 89
        assert result.status == SkuStatus.NEW

    def test_malformed_date_is_caller_error(self):
        position = InventoryPosition(current_stock_qty=1, first_inward_date="not-a-date")
        with pytest.raises(ValueError):
            classify_sku(position, DEFAULT_PLANNING_THRESHOLDS, TODAY)

    def test_defaults_to_today(self):
        position = InventoryPosition(current_stock_qty=10, first_inward_date=date.today())
        assert classify_sku(position, DEFAULT_PLANNING_THRESHOLDS).status == SkuStatus.NEW


class TestTotality:
    """Her SKU'nun tam olarak bir duruma atanması testleri."""

    def test_exactly_one_status_for_every_combination(self):
        for stock in (0, 1, 4, 5, 100):
            for first_inward in (0, 89, 90, 179, 180, 400):
                for last_out in (None, 0, 89, 90, 179, 180, 400):
                    result = classify_sku(
                        _position(stock, first_inward, last_out),
                        DEFAULT_PLANNING_THRESHOLDS,
                        TODAY,
                    )
                    assert result.status in set(SkuStatus)
                    assert result.days_since_last_movement >= 0
                    assert result.reason

    def test_rule_order(self):
        names = [rule.__name__ for rule in CLASSIFICATION_RULES]
        assert names == [
            "_rule_new",
            "_rule_zero_stock",
            "_rule_non_moving",
            "_rule_slow_moving",
            "_rule_active",
        ]

    def test_pure_function(self):
        position = _position(10, 200)
        first = classify_sku(position, DEFAULT_PLANNING_THRESHOLDS, TODAY)
        second = classify_sku(position, DEFAULT_PLANNING_THRESHOLDS, TODAY)
        assert first == second


class TestBatch:
    """Toplu sınıflandırma ve özet testleri."""

    def test_classify_skus_keeps_input_order(self):
        positions = [_position(10, 30, sku="A"), _position(10, 200, sku="B"), _position(0, 300, sku="C")]
        results = classify_skus(positions, DEFAULT_PLANNING_THRESHOLDS, TODAY)
        assert [r.sku for r in results] == ["A", "B", "C"]
        assert [r.status for r in results] == [SkuStatus.NEW, SkuStatus.NON_MOVING, SkuStatus.ACTIVE]

    def test_summary_counts(self):
        positions = [
            _position(10, 30),
            _position(10, 200),
            _position(10, 300, 100),
            _position(10, 300, 120),
            _position(0, 300),
        ]
        summary = summarize_stock_health(positions, DEFAULT_PLANNING_THRESHOLDS, TODAY)
        assert summary.validation.is_valid is True
        assert summary.total == 5
        assert summary.counts[SkuStatus.NEW] == 1
        assert summary.counts[SkuStatus.NON_MOVING] == 1
        assert summary.counts[SkuStatus.SLOW_MOVING] == 2
        assert summary.counts[SkuStatus.ACTIVE] == 1

    def test_summary_with_invalid_thresholds_skips_classification(self):
        thresholds = replace(DEFAULT_PLANNING_THRESHOLDS, non_moving_days=10)
        summary = summarize_stock_health([_position(10, 200)], thresholds, TODAY)
        assert summary.validation.is_valid is False
        assert summary.results == []
        assert all(count == 0 for count in summary.counts.values())
