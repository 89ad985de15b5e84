"""
用户相关 Pydantic Schema
"""
from pydantic import Field

from henwiki.schemas.base import BaseSchema, IDSchema, TimestampSchema
from henwiki.schemas.rbac import RoleRead


class UserRead(IDSchema, TimestampSchema):
    """用户读取响应"""
    email: str = Field(..., description="邮箱")
    name: str | None = Field(None, description="展示名")
    is_active: bool = Field(..., description="是否启用")


class UserMe(UserRead):
    """当前用户信息（含角色与有效权限）"""
    roles: list[RoleRead] = Field(default_factory=list, description="用户角色列表")
    highest_role: RoleRead | None = Field(None, description="等级最高的角色")
    permissions: list[str] = Field(default_factory=list, description="有效权限 code（已排序）")
    permission_flags: dict[str, int] = Field(default_factory=dict, description="权限标记 {can_xxx: 0/1}")
