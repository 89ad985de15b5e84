"""
权限注册表（单一真源）

新增/修改权限时仅需在此处维护，迁移与种子脚本都从这里导出。
权限 code 采用 module.resource.action 三段式；module 只用于分组展示，
不同 code 之间没有任何蕴含关系。
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PermissionItem:
    code: str
    name: str
    default_roles: tuple[str, ...] = ()

    @property
    def module(self) -> str:
        return self.code.split(".", 1)[0]

    @property
    def resource(self) -> str:
        # admin.users.role.assign -> resource "users.role"
        return ".".join(self.code.split(".")[1:-1])

    @property
    def action(self) -> str:
        return self.code.rsplit(".", 1)[-1]


@dataclass(frozen=True)
class SystemRoleItem:
    code: str
    name: str
    description: str
    level: int


SUPER_ADMIN_ROLE = "super_admin"
ADMIN_ROLE = "admin"
EDITOR_ROLE = "editor"
DEFAULT_USER_ROLE = "user"

_ADMINS = (SUPER_ADMIN_ROLE, ADMIN_ROLE)
_CONTENT = (SUPER_ADMIN_ROLE, ADMIN_ROLE, EDITOR_ROLE)

# 按功能模块分组便于后续维护；super_admin 持有全部权限，无需在 default_roles 中声明
PERMISSION_REGISTRY: list[PermissionItem] = [
    # 后台概览
    PermissionItem("admin.dashboard.view", "查看后台首页", _CONTENT),
    PermissionItem("admin.stats.view", "查看统计数据", _CONTENT),
    PermissionItem("admin.analytics.view", "查看分析报表", _ADMINS),
    PermissionItem("admin.settings.view", "查看系统设置", _ADMINS),
    # 用户
    PermissionItem("admin.users.view", "查看用户", _ADMINS),
    PermissionItem("admin.users.edit", "编辑用户", _ADMINS),
    PermissionItem("admin.users.role.assign", "分配用户角色", (SUPER_ADMIN_ROLE,)),
    # 角色与权限
    PermissionItem("admin.roles.view", "查看角色", (SUPER_ADMIN_ROLE,)),
    PermissionItem("admin.roles.create", "创建角色", (SUPER_ADMIN_ROLE,)),
    PermissionItem("admin.roles.edit", "编辑角色", (SUPER_ADMIN_ROLE,)),
    PermissionItem("admin.roles.delete", "删除角色", (SUPER_ADMIN_ROLE,)),
    PermissionItem("admin.permissions.manage", "管理权限", (SUPER_ADMIN_ROLE,)),
    # 词条
    PermissionItem("admin.terms.view", "查看词条", _CONTENT),
    PermissionItem("admin.terms.edit", "编辑词条", _CONTENT),
    PermissionItem("admin.terms.delete", "删除词条", _ADMINS),
    PermissionItem("admin.terms.approve", "审核通过词条", _CONTENT),
    PermissionItem("admin.terms.reject", "驳回词条", _CONTENT),
    # 论文
    PermissionItem("admin.papers.view", "查看论文", _CONTENT),
    PermissionItem("admin.papers.edit", "编辑论文", _CONTENT),
    PermissionItem("admin.papers.delete", "删除论文", _ADMINS),
    PermissionItem("admin.papers.approve", "审核通过论文", _CONTENT),
    PermissionItem("admin.papers.reject", "驳回论文", _CONTENT),
    # 审核队列
    PermissionItem("admin.review.view", "查看审核队列", _CONTENT),
    PermissionItem("admin.review.approve", "审核通过", _CONTENT),
    PermissionItem("admin.review.reject", "审核驳回", _CONTENT),
    # 评论
    PermissionItem("admin.comments.view", "查看评论", _CONTENT),
    PermissionItem("admin.comments.delete", "删除评论", _ADMINS),
    # 广告
    PermissionItem("admin.ads.view", "查看广告", _ADMINS),
    PermissionItem("admin.ads.create", "创建广告", _ADMINS),
    PermissionItem("admin.ads.edit", "编辑广告", _ADMINS),
    PermissionItem("admin.ads.delete", "删除广告", _ADMINS),
]

# 种子系统角色：迁移时写入，is_system=True，管理后台永远不可修改/删除
SYSTEM_ROLES: list[SystemRoleItem] = [
    SystemRoleItem(SUPER_ADMIN_ROLE, "超级管理员", "拥有系统全部权限", 100),
    SystemRoleItem(ADMIN_ROLE, "管理员", "管理用户与内容，不可管理角色权限", 80),
    SystemRoleItem(EDITOR_ROLE, "编辑", "负责内容编辑与审核", 50),
    SystemRoleItem(DEFAULT_USER_ROLE, "普通用户", "基础访问角色，不含后台权限", 0),
]

PERMISSION_CODES: tuple[str, ...] = tuple(p.code for p in PERMISSION_REGISTRY)


def role_permission_codes(role_code: str) -> list[str]:
    """某个系统角色默认持有的权限 code 列表。"""
    if role_code == SUPER_ADMIN_ROLE:
        return list(PERMISSION_CODES)
    return [p.code for p in PERMISSION_REGISTRY if role_code in p.default_roles]
