"""Süre sınırlı okuma-arkası (read-through) yanıt önbelleği.

Veri erişim katmanı tarafından kullanılır; motor bu önbelleğe hiç dokunmaz.
- Anahtar: normalize edilmiş istek imzası (kaynak + sıralı parametreler)
- Her kayıt sabit bir TTL sonunda geçersiz olur
- Tek anahtar veya önek ile geçersiz kılma
- Depolama ve saat dışarıdan verilebilir (test ve paylaşımlı store için)
"""

from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, MutableMapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 120.0


@dataclass
class CacheEntry:
    value: Any
    expires_at: float


def build_cache_key(resource: str, params: Optional[dict] = None) -> str:
    """İstek imzasından kararlı bir önbellek anahtarı üretir."""
    normalized = json.dumps(params, sort_keys=True, separators=(",", ":"), default=str)
    return f"GET:{resource}?params={normalized}"


class ResponseCache:
    """TTL destekli, önek ile geçersiz kılınabilen anahtar-değer önbelleği."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        store: Optional[MutableMapping[str, CacheEntry]] = None,
        clock: Callable[[], float] = time.monotonic,
        namespace: str = "",
    ) -> None:
        if ttl_seconds < 0:
            raise ValueError("TTL negatif olamaz")
        self.ttl_seconds = ttl_seconds
        self.namespace = namespace
        self._store: MutableMapping[str, CacheEntry] = store if store is not None else {}
        self._clock = clock
        self._lock = threading.Lock()

    def _full_key(self, key: str) -> str:
        return f"{self.namespace}:{key}" if self.namespace else key

    def get(self, key: str) -> Optional[Any]:
        """Geçerli değeri döndürür; süresi dolmuşsa siler ve None döner."""
        full_key = self._full_key(key)
        with self._lock:
            entry = self._store.get(full_key)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._store[full_key]
                logger.debug("Önbellek süresi doldu: %s", full_key)
                return None
            return entry.value

    def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        with self._lock:
            self._store[self._full_key(key)] = CacheEntry(
                value=value, expires_at=self._clock() + ttl
            )

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._store.pop(self._full_key(key), None)

    def invalidate_prefix(self, prefix: str) -> int:
        """Öneki eşleşen tüm kayıtları siler, silinen kayıt sayısını döndürür."""
        full_prefix = self._full_key(prefix)
        with self._lock:
            keys = [k for k in self._store if k.startswith(full_prefix)]
            for k in keys:
                del self._store[k]
        if keys:
            logger.debug("Önbellekten %d kayıt silindi (önek: %s)", len(keys), full_prefix)
        return len(keys)

    def get_or_fetch(
        self,
        key: str,
        fetcher: Callable[[], Any],
        ttl_seconds: Optional[float] = None,
    ) -> Any:
        """Önbellekte varsa döndürür, yoksa fetcher'ı çağırıp sonucu saklar."""
        cached = self.get(key)
        if cached is not None:
            logger.debug("Önbellek isabeti: %s", key)
            return cached

        value = fetcher()
        self.set(key, value, ttl_seconds)
        return value

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
