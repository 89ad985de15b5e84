"""
存储抽象：业务层只依赖这两个 Protocol，具体实现在进程启动时注入。
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Protocol

from henwiki.models import Permission, Role


class RoleStore(Protocol):
    async def find_by_code(self, code: str) -> Role | None: ...

    async def find_by_id(self, role_id: int) -> Role | None: ...

    async def list_all(self) -> list[Role]: ...

    async def list_for_user(self, user_id: int) -> list[Role]: ...

    async def highest_for_user(self, user_id: int) -> Role | None: ...

    async def existing_ids(self, role_ids: Iterable[int]) -> set[int]: ...

    async def create(
        self,
        code: str,
        name: str,
        description: str | None = None,
        level: int = 0,
        is_system: bool = False,
    ) -> Role: ...

    async def update_non_system(self, role_id: int, fields: Mapping[str, Any]) -> int: ...

    async def delete_non_system(self, role_id: int) -> int: ...

    async def replace_user_roles(self, user_id: int, role_ids: Sequence[int]) -> None: ...


class PermissionStore(Protocol):
    async def list_all(self) -> list[Permission]: ...

    async def list_by_module(self, module: str) -> list[Permission]: ...

    async def list_for_role(self, role_id: int) -> list[Permission]: ...

    async def list_for_roles(self, role_ids: Sequence[int]) -> dict[int, list[Permission]]: ...

    async def codes_for_roles(self, role_ids: Sequence[int]) -> set[str]: ...

    async def existing_ids(self, permission_ids: Iterable[int]) -> set[int]: ...

    async def replace_role_permissions(self, role_id: int, permission_ids: Sequence[int]) -> None: ...
