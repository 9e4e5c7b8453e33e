"""Sevkiyat ve SKU verisi için veri erişim katmanı (DynamoDB).

Motorun ihtiyaç duyduğu ham veriyi getirir; sonuçlar ResponseCache üzerinden
önbelleğe alınır. Kayıtlar DynamoDB'den geldiği gibi (iki isimlendirme ile de)
döndürülür; alan çözümleme projeksiyon tarafında yapılır.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Optional

import boto3
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError

from data_layer.response_cache import ResponseCache, build_cache_key
from data_layer.settings import Settings, thresholds_from_mapping
from inventory_engine.models.inventory import InventoryPosition, PlanningThresholds

logger = logging.getLogger(__name__)

RECORDS_RESOURCE = "incoming-records"
ITEMS_RESOURCE = "incoming-record-items"
SKUS_RESOURCE = "skus"
SETTINGS_RESOURCE = "planning-settings"


def from_dynamo(obj: Any) -> Any:
    """DynamoDB Decimal değerlerini int/float'a çevirir."""
    if isinstance(obj, Decimal):
        return int(obj) if obj == obj.to_integral_value() else float(obj)
    if isinstance(obj, dict):
        return {k: from_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [from_dynamo(i) for i in obj]
    return obj


def _first(raw: dict, *names: str) -> Any:
    for name in names:
        value = raw.get(name)
        if value is not None and value != "":
            return value
    return None


class ShipmentRepository:
    """Gelen sevkiyat kayıtları, kalemleri, SKU pozisyonları ve planlama ayarları."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        dynamodb_resource: Optional[Any] = None,
        cache: Optional[ResponseCache] = None,
    ):
        self.settings = settings or Settings()
        # dependency injection destekli
        self.dynamodb = dynamodb_resource or boto3.resource(
            "dynamodb", region_name=self.settings.region_name
        )
        self.cache = cache or ResponseCache(ttl_seconds=self.settings.cache_ttl_seconds)

        self.records_table = self.dynamodb.Table(self.settings.table_name("IncomingRecords"))
        self.items_table = self.dynamodb.Table(self.settings.table_name("IncomingRecordItems"))
        self.skus_table = self.dynamodb.Table(self.settings.table_name("Skus"))
        self.settings_table = self.dynamodb.Table(self.settings.table_name("Settings"))

    # --- Sayfalı okuma ---

    def _scan_all(self, table: Any, **kwargs: Any) -> list[dict]:
        items: list[dict] = []
        try:
            response = table.scan(**kwargs)
            items.extend(response.get("Items", []))
            while "LastEvaluatedKey" in response:
                response = table.scan(ExclusiveStartKey=response["LastEvaluatedKey"], **kwargs)
                items.extend(response.get("Items", []))
        except ClientError as e:
            logger.error("DynamoDB scan hatası [%s]: %s", getattr(table, "name", table), e)
            raise
        return [from_dynamo(i) for i in items]

    def _query_all(self, table: Any, **kwargs: Any) -> list[dict]:
        items: list[dict] = []
        try:
            response = table.query(**kwargs)
            items.extend(response.get("Items", []))
            while "LastEvaluatedKey" in response:
                response = table.query(ExclusiveStartKey=response["LastEvaluatedKey"], **kwargs)
                items.extend(response.get("Items", []))
        except ClientError as e:
            logger.error("DynamoDB query hatası [%s]: %s", getattr(table, "name", table), e)
            raise
        return [from_dynamo(i) for i in items]

    # --- Sevkiyat kayıtları ---

    def list_records(
        self, date_from: Optional[str] = None, date_to: Optional[str] = None
    ) -> list[dict]:
        """Gelen sevkiyat kayıtlarını teslim tarihi aralığına göre döndürür (durum filtresi yok).

        Tarih alanı iki isimlendirmeden biriyle yazılmış olabilir; filtre ikisini de kapsar.
        """
        params = {"date_from": date_from, "date_to": date_to}
        key = build_cache_key(RECORDS_RESOURCE, params)

        def fetch() -> list[dict]:
            condition = None
            if date_from:
                condition = Attr("receiving_date").gte(date_from) | Attr("receivingDate").gte(date_from)
            if date_to:
                upper = Attr("receiving_date").lte(date_to) | Attr("receivingDate").lte(date_to)
                condition = upper if condition is None else condition & upper
            kwargs = {"FilterExpression": condition} if condition is not None else {}
            records = self._scan_all(self.records_table, **kwargs)
            logger.info("%d sevkiyat kaydı okundu", len(records))
            return records

        return self.cache.get_or_fetch(key, fetch)

    def get_line_items(self, record_id: Any) -> list[dict]:
        key = build_cache_key(ITEMS_RESOURCE, {"record_id": record_id})
        return self.cache.get_or_fetch(
            key,
            lambda: self._query_all(
                self.items_table,
                KeyConditionExpression=Key("record_id").eq(record_id),
            ),
        )

    def get_line_items_by_record(self, record_ids: list[Any]) -> dict[Any, list[dict]]:
        return {record_id: self.get_line_items(record_id) for record_id in record_ids}

    def invalidate_records(self) -> None:
        """Kayıt veya kalem değiştiğinde ilgili önbellek girdilerini temizler."""
        removed = self.cache.invalidate_prefix(f"GET:{RECORDS_RESOURCE}")
        removed += self.cache.invalidate_prefix(f"GET:{ITEMS_RESOURCE}")
        logger.info("Sevkiyat önbelleği temizlendi (%d kayıt)", removed)

    # --- SKU pozisyonları ---

    def list_inventory_positions(self) -> list[InventoryPosition]:
        """SKU tablosundan sınıflandırma girdilerini oluşturur.

        İlk giriş tarihi olmayan SKU'lar sınıflandırılamaz ve atlanır.
        """
        key = build_cache_key(SKUS_RESOURCE)
        rows = self.cache.get_or_fetch(key, lambda: self._scan_all(self.skus_table))

        positions: list[InventoryPosition] = []
        skipped = 0
        for row in rows:
            first_inward = _first(row, "firstInwardDate", "first_inward_date")
            if first_inward is None:
                skipped += 1
                continue
            positions.append(
                InventoryPosition(
                    current_stock_qty=int(_first(row, "currentStock", "current_stock") or 0),
                    first_inward_date=first_inward,
                    last_outbound_date=_first(row, "lastOutboundDate", "last_outbound_date"),
                    sku=_first(row, "skuCode", "sku_code", "sku"),
                )
            )
        if skipped:
            logger.warning("İlk giriş tarihi olmayan %d SKU atlandı", skipped)
        return positions

    def invalidate_skus(self) -> None:
        self.cache.invalidate_prefix(f"GET:{SKUS_RESOURCE}")

    # --- Planlama ayarları ---

    def get_planning_thresholds(self, settings_key: str = "default") -> PlanningThresholds:
        """Kayıtlı eşik setini döndürür; kayıt yoksa varsayılan eşikler."""
        key = build_cache_key(SETTINGS_RESOURCE, {"settings_key": settings_key})

        def fetch() -> dict:
            try:
                response = self.settings_table.get_item(Key={"settings_key": settings_key})
            except ClientError as e:
                logger.error("Planlama ayarları okunamadı [%s]: %s", settings_key, e)
                raise
            item = from_dynamo(response.get("Item") or {})
            return _first(item, "planningThresholds", "planning_thresholds") or {}

        data = self.cache.get_or_fetch(key, fetch)
        return thresholds_from_mapping(data, source=f"Settings/{settings_key}")

    def save_planning_thresholds(
        self, thresholds: PlanningThresholds, settings_key: str = "default"
    ) -> None:
        """Eşik setini kaydeder. Doğrulama çağıranın sorumluluğundadır."""
        payload = {
            k: Decimal(str(v)) if isinstance(v, float) else v
            for k, v in thresholds.to_dict().items()
        }
        try:
            self.settings_table.update_item(
                Key={"settings_key": settings_key},
                UpdateExpression="SET planning_thresholds = :t",
                ExpressionAttributeValues={":t": payload},
            )
        except ClientError as e:
            logger.error("Planlama ayarları kaydedilemedi [%s]: %s", settings_key, e)
            raise
        self.cache.invalidate(build_cache_key(SETTINGS_RESOURCE, {"settings_key": settings_key}))
