"""
Permission checks over a resolved authorization payload.

A gate without a payload is "loading": every predicate answers False, which
callers must read as unknown rather than denied.
"""

from typing import Iterable, List, Optional

from keno_admin.modules.auth.schemas import AuthorizationPayload


class PermissionGate:
    def __init__(self, payload: Optional[AuthorizationPayload] = None):
        self._payload = payload
        self.is_loading = payload is None

    @property
    def payload(self) -> Optional[AuthorizationPayload]:
        return self._payload

    @property
    def permissions(self) -> List[str]:
        return list(self._payload.permissions) if self._payload else []

    @property
    def groups(self) -> List[str]:
        return list(self._payload.groups) if self._payload else []

    def load(self, payload: AuthorizationPayload) -> None:
        self._payload = payload
        self.is_loading = False

    def clear(self) -> None:
        self._payload = None
        self.is_loading = False

    def has_permission(self, key: str) -> bool:
        if self._payload is None:
            return False
        return key in self._payload.permissions

    def has_group(self, group: str) -> bool:
        if self._payload is None:
            return False
        return group in self._payload.groups

    def has_any_permission(self, keys: Iterable[str]) -> bool:
        if self._payload is None:
            return False
        return any(key in self._payload.permissions for key in keys)

    def has_all_permissions(self, keys: Iterable[str]) -> bool:
        if self._payload is None:
            return False
        return all(key in self._payload.permissions for key in keys)
