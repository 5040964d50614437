import time
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class RoleCache(Generic[T]):
    """Holds the last loaded role list until it expires or is invalidated.

    Owned by whoever creates it (the application keeps one on ``app.state``);
    the authorization resolver never reads from it.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._value: Optional[T] = None
        self._expires_at = 0.0

    @property
    def is_fresh(self) -> bool:
        return self._value is not None and self._clock() < self._expires_at

    def get(self, loader: Callable[[], T], force_refresh: bool = False) -> T:
        if force_refresh or not self.is_fresh:
            self._value = loader()
            self._expires_at = self._clock() + self.ttl_seconds
        return self._value

    def invalidate(self) -> None:
        self._value = None
        self._expires_at = 0.0
