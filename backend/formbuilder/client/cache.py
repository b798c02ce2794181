"""クエリキャッシュ: キー (タプル) 単位で結果を保持し、書き込み後にプレフィックスで無効化する"""
import time
from typing import Any, Callable, Hashable, Optional

QueryKey = tuple[Hashable, ...]

_MISSING = object()


class QueryCache:
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[QueryKey, tuple[Any, float]] = {}

    def __contains__(self, key: QueryKey) -> bool:
        return key in self._entries

    def keys(self) -> list[QueryKey]:
        return list(self._entries)

    def get(self, key: QueryKey, default: Any = None, stale_after: Optional[float] = None) -> Any:
        """キャッシュ取得。stale_after秒より古ければdefault"""
        entry = self._entries.get(key)
        if entry is None:
            return default
        value, stored_at = entry
        if stale_after is not None and self._clock() - stored_at > stale_after:
            return default
        return value

    def set(self, key: QueryKey, value: Any) -> None:
        self._entries[key] = (value, self._clock())

    def fetch(self, key: QueryKey, loader: Callable[[], Any], stale_after: Optional[float] = None) -> Any:
        """キャッシュにあれば返し、無ければ (または古ければ) loaderで取得して保存"""
        value = self.get(key, _MISSING, stale_after=stale_after)
        if value is _MISSING:
            value = loader()
            self.set(key, value)
        return value

    def invalidate(self, prefix: QueryKey) -> int:
        """prefixで始まるキーを全て削除し、削除件数を返す"""
        size = len(prefix)
        targets = [key for key in self._entries if key[:size] == prefix]
        for key in targets:
            del self._entries[key]
        return len(targets)

    def clear(self) -> None:
        self._entries.clear()
