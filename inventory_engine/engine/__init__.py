from inventory_engine.engine.movement_classifier import (
    classify_sku,
    classify_skus,
    summarize_stock_health,
)
from inventory_engine.engine.quantity_reconciler import (
    reconcile_quantities,
    summarize_record_receiving,
)
from inventory_engine.engine.receiving_validator import ReceivingValidator
from inventory_engine.engine.record_projector import project_records
from inventory_engine.engine.threshold_validator import (
    get_default_planning_thresholds,
    validate_planning_thresholds,
)

__all__ = [
    "ReceivingValidator",
    "classify_sku",
    "classify_skus",
    "get_default_planning_thresholds",
    "project_records",
    "reconcile_quantities",
    "summarize_record_receiving",
    "summarize_stock_health",
    "validate_planning_thresholds",
]
