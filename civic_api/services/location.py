"""現在地の提供

端末から届いた最新の座標を保持し、変更を購読者に通知する。
座標が一度も届いていなければ既定地点を返す。
"""
import logging
import threading
from typing import Callable, List, Optional

from ..config import DEFAULT_LAT, DEFAULT_LNG
from .places import Coordinate

logger = logging.getLogger(__name__)

Listener = Callable[[Coordinate], None]


class LocationProvider:
    def __init__(self, default: Optional[Coordinate] = None):
        self.default = default or Coordinate(DEFAULT_LAT, DEFAULT_LNG)
        self._current: Optional[Coordinate] = None
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()

    def last_known(self) -> Coordinate:
        """最後に届いた座標、無ければ既定地点"""
        with self._lock:
            return self._current or self.default

    @property
    def has_fix(self) -> bool:
        with self._lock:
            return self._current is not None

    def update(self, coordinate: Coordinate) -> None:
        with self._lock:
            self._current = coordinate
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(coordinate)
            except Exception:
                # 1つの購読者の失敗で他への通知を止めない
                logger.exception(f"Location listener {listener!r} failed")

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """購読を登録し、解除用の関数を返す"""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def reset(self) -> None:
        with self._lock:
            self._current = None


_provider: Optional[LocationProvider] = None


def get_location_provider() -> LocationProvider:
    """FastAPI Depends用"""
    global _provider
    if _provider is None:
        _provider = LocationProvider()
    return _provider
