"""DynamoDB tablo oluşturma ve veri yükleme.

4 tablo: IncomingRecords, IncomingRecordItems, Skus, Settings

Kullanım:
    python -m data_layer.infrastructure.dynamodb_setup            # Tabloları oluştur
    python -m data_layer.infrastructure.dynamodb_setup --delete   # Tabloları sil
"""

from __future__ import annotations

import logging
import sys
from decimal import Decimal
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from data_layer.settings import Settings, load_settings

logger = logging.getLogger(__name__)

BOTO_CONFIG = Config(retries={"max_attempts": 3})

TABLE_DEFINITIONS = [
    {
        "TableName": "IncomingRecords",
        "KeySchema": [
            {"AttributeName": "id", "KeyType": "HASH"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "id", "AttributeType": "S"},
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        "TableName": "IncomingRecordItems",
        "KeySchema": [
            {"AttributeName": "record_id", "KeyType": "HASH"},
            {"AttributeName": "item_id", "KeyType": "RANGE"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "record_id", "AttributeType": "S"},
            {"AttributeName": "item_id", "AttributeType": "S"},
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        "TableName": "Skus",
        "KeySchema": [
            {"AttributeName": "sku", "KeyType": "HASH"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "sku", "AttributeType": "S"},
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        "TableName": "Settings",
        "KeySchema": [
            {"AttributeName": "settings_key", "KeyType": "HASH"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "settings_key", "AttributeType": "S"},
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
]


def _client(settings: Settings, client: Optional[Any] = None) -> Any:
    return client or boto3.client(
        "dynamodb", region_name=settings.region_name, config=BOTO_CONFIG
    )


def table_definitions(settings: Settings) -> list[dict]:
    """Tablo tanımlarını ayarlardaki önek ile döndürür."""
    return [
        {**table_def, "TableName": settings.table_name(table_def["TableName"])}
        for table_def in TABLE_DEFINITIONS
    ]


def create_tables(settings: Settings, client: Optional[Any] = None) -> list[str]:
    """Eksik tabloları oluşturur, oluşturulan tablo adlarını döndürür."""
    dynamodb = _client(settings, client)
    created = []

    for table_def in table_definitions(settings):
        table_name = table_def["TableName"]
        try:
            dynamodb.describe_table(TableName=table_name)
            logger.info("%s zaten mevcut, atlanıyor", table_name)
        except ClientError as e:
            if e.response["Error"]["Code"] != "ResourceNotFoundException":
                raise
            logger.info("%s oluşturuluyor...", table_name)
            dynamodb.create_table(**table_def)
            # Tablonun aktif olmasını bekle
            dynamodb.get_waiter("table_exists").wait(TableName=table_name)
            created.append(table_name)
    return created


def to_dynamo(obj: Any) -> Any:
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, dict):
        return {k: to_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [to_dynamo(i) for i in obj]
    return obj


def load_data_to_table(
    table_name: str, data: list, settings: Settings, resource: Optional[Any] = None
) -> int:
    """JSON verisini DynamoDB tablosuna batch write ile yükler."""
    dynamodb = resource or boto3.resource("dynamodb", region_name=settings.region_name)
    table = dynamodb.Table(settings.table_name(table_name))
    with table.batch_writer() as batch:
        for item in to_dynamo(data):
            batch.put_item(Item=item)
    logger.info("%s: %d kayıt yüklendi", table_name, len(data))
    return len(data)


def delete_tables(settings: Settings, client: Optional[Any] = None) -> None:
    """Tüm tabloları siler (dikkatli kullan)."""
    dynamodb = _client(settings, client)
    for table_def in table_definitions(settings):
        table_name = table_def["TableName"]
        try:
            dynamodb.delete_table(TableName=table_name)
            logger.info("%s silindi", table_name)
        except ClientError:
            logger.info("%s bulunamadı, atlanıyor", table_name)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    current = load_settings()
    if len(sys.argv) > 1 and sys.argv[1] == "--delete":
        delete_tables(current)
    else:
        create_tables(current)
