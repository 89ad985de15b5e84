"""
角色 / 权限相关 Pydantic Schema
"""
from pydantic import Field, field_validator

from henwiki.schemas.base import BaseSchema, IDSchema, TimestampSchema


class PermissionRead(IDSchema):
    """权限读取响应"""
    code: str = Field(..., description="权限代码 module.resource.action")
    name: str = Field(..., description="权限名称")
    module: str = Field(..., description="模块")
    resource: str = Field(..., description="资源")
    action: str = Field(..., description="动作")


class PermissionListResponse(BaseSchema):
    """权限列表（附带按模块分组）"""
    permissions: list[PermissionRead] = Field(default_factory=list)
    grouped: dict[str, list[PermissionRead]] = Field(default_factory=dict, description="按 module 分组")


class RoleRead(IDSchema, TimestampSchema):
    """角色读取响应"""
    code: str = Field(..., description="角色代码")
    name: str = Field(..., description="角色名称")
    description: str | None = Field(None, description="角色描述")
    level: int = Field(..., description="角色等级")
    is_system: bool = Field(..., description="是否系统角色")


class RoleDetailRead(RoleRead):
    """角色（含权限）"""
    permissions: list[PermissionRead] = Field(default_factory=list, description="角色权限列表")


class RoleListResponse(BaseSchema):
    roles: list[RoleDetailRead] = Field(default_factory=list)


class RoleCreate(BaseSchema):
    """创建角色请求"""
    code: str = Field(..., min_length=1, max_length=64, pattern=r"^[a-z][a-z0-9_]*$", description="角色代码")
    name: str = Field(..., min_length=1, max_length=100, description="角色名称")
    description: str | None = Field(None, description="角色描述")
    level: int = Field(0, description="角色等级")
    permission_ids: list[int] | None = Field(None, description="初始权限 ID 列表")


class RoleUpdate(BaseSchema):
    """更新角色请求（仅更新传入的字段）"""
    name: str | None = Field(None, min_length=1, max_length=100, description="角色名称")
    description: str | None = Field(None, description="角色描述")
    level: int | None = Field(None, description="角色等级")
    permission_ids: list[int] | None = Field(None, description="权限 ID 列表（全量替换）")

    @field_validator("name", "level")
    @classmethod
    def _reject_null(cls, value):
        # 只校验显式传入的字段：name / level 在库中非空，不能被置为 null
        if value is None:
            raise ValueError("field may be omitted but not set to null")
        return value


class RoleAssignment(BaseSchema):
    """用户角色分配请求（全量替换）"""
    role_ids: list[int] = Field(..., description="角色 ID 列表")


class UserRolesResponse(BaseSchema):
    user_id: int
    roles: list[RoleRead] = Field(default_factory=list)
