"""缓存 Key 注册表实现。

禁止在业务代码中硬编码缓存 Key，统一从此处生成，便于失效管理。
"""

from __future__ import annotations


class CacheKeys:
    prefix = "acl"

    # ===== 有效权限集合 =====
    @classmethod
    def user_permissions_prefix(cls) -> str:
        """全部用户有效权限缓存的公共前缀（按前缀批量失效）。"""
        return f"{cls.prefix}:perm:"

    @classmethod
    def user_permissions(cls, user_id: int) -> str:
        """单个用户的有效权限 code 集合。"""
        return f"{cls.user_permissions_prefix()}{user_id}"

    # ===== 失效代数（不在 perm 前缀下，按前缀清缓存时不会被删掉） =====
    @classmethod
    def permissions_generation(cls) -> str:
        """全局权限代数：角色权限变更时递增。"""
        return f"{cls.prefix}:gen:perm"

    @classmethod
    def user_permissions_generation(cls, user_id: int) -> str:
        """单用户权限代数：该用户角色变更时递增。"""
        return f"{cls.prefix}:gen:perm:{user_id}"
