"""Merkezi ayar yükleyici - .env ve planlama eşikleri dosyası.

Motor (inventory_engine) ortam değişkeni okumaz; ayarlar burada toplanıp
çağırana verilir.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from inventory_engine.engine.threshold_validator import validate_planning_thresholds
from inventory_engine.models.inventory import DEFAULT_PLANNING_THRESHOLDS, PlanningThresholds

logger = logging.getLogger(__name__)

# Proje kökündeki .env
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"

DEFAULT_REGION = "us-east-1"
DEFAULT_CACHE_TTL_SECONDS = 120.0


@dataclass(frozen=True)
class Settings:
    region_name: str = DEFAULT_REGION
    table_prefix: str = ""
    cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS
    thresholds_file: Optional[str] = None

    def table_name(self, name: str) -> str:
        return f"{self.table_prefix}{name}"


def load_settings(env_path: Optional[Path] = None) -> Settings:
    """.env dosyasını yükler (mevcut ortamı ezmez) ve Settings döndürür."""
    load_dotenv(env_path or _ENV_PATH, override=False)

    raw_ttl = os.environ.get("INVENTORY_CACHE_TTL_SECONDS")
    try:
        ttl = float(raw_ttl) if raw_ttl else DEFAULT_CACHE_TTL_SECONDS
    except ValueError:
        raise ValueError(f"INVENTORY_CACHE_TTL_SECONDS sayı olmalı: {raw_ttl!r}") from None
    if ttl < 0:
        raise ValueError(f"INVENTORY_CACHE_TTL_SECONDS negatif olamaz: {ttl}")

    return Settings(
        region_name=os.environ.get("AWS_DEFAULT_REGION", DEFAULT_REGION),
        table_prefix=os.environ.get("INVENTORY_TABLE_PREFIX", ""),
        cache_ttl_seconds=ttl,
        thresholds_file=os.environ.get("PLANNING_THRESHOLDS_FILE") or None,
    )


def thresholds_from_mapping(data: Optional[dict], source: str = "settings") -> PlanningThresholds:
    """Eşik sözlüğünü doğrular; geçersizse uyarı loglayıp varsayılanı döndürür."""
    if not data:
        return DEFAULT_PLANNING_THRESHOLDS

    thresholds = PlanningThresholds.from_dict(data)
    result = validate_planning_thresholds(thresholds)
    if not result.is_valid:
        logger.warning(
            "Geçersiz planlama eşikleri (%s), varsayılan kullanılıyor: %s",
            source,
            "; ".join(result.errors),
        )
        return DEFAULT_PLANNING_THRESHOLDS
    return thresholds


def load_planning_thresholds(path: Optional[str] = None) -> PlanningThresholds:
    """YAML dosyasından planlama eşiklerini okur.

    Dosya yoksa veya yol verilmemişse varsayılan eşikler kullanılır. Dosya
    `planning_thresholds:` anahtarı altında ya da doğrudan kök seviyede olabilir.
    """
    if not path:
        return DEFAULT_PLANNING_THRESHOLDS

    file_path = Path(path)
    if not file_path.exists():
        logger.info("Eşik dosyası bulunamadı, varsayılan kullanılıyor: %s", path)
        return DEFAULT_PLANNING_THRESHOLDS

    with open(file_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    data = config.get("planning_thresholds", config) if isinstance(config, dict) else None
    return thresholds_from_mapping(data, source=str(file_path))
