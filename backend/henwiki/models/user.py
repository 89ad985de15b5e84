from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IntPrimaryKeyMixin, TimestampMixin


class User(Base, IntPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True, comment="邮箱（登录名）")
    name: Mapped[str | None] = mapped_column(String(100), nullable=True, comment="展示名")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true", comment="是否启用")

    def __repr__(self) -> str:
        return f"<User(email={self.email})>"


class Role(Base, IntPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "roles"

    code: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, comment="角色代码")
    name: Mapped[str] = mapped_column(String(100), nullable=False, comment="角色名")
    description: Mapped[str | None] = mapped_column(Text, nullable=True, comment="描述")
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0", comment="角色等级（仅用于展示排序）")
    is_system: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false", comment="系统角色不可修改/删除")

    def __repr__(self) -> str:
        return f"<Role(code={self.code})>"


class Permission(Base, IntPrimaryKeyMixin):
    __tablename__ = "permissions"

    code: Mapped[str] = mapped_column(String(120), unique=True, nullable=False, comment="权限编码 module.resource.action")
    name: Mapped[str] = mapped_column(String(100), nullable=False, comment="权限名称")
    module: Mapped[str] = mapped_column(String(50), nullable=False, index=True, comment="模块（仅用于分组展示）")
    resource: Mapped[str] = mapped_column(String(50), nullable=False, comment="资源")
    action: Mapped[str] = mapped_column(String(50), nullable=False, comment="动作")

    def __repr__(self) -> str:
        return f"<Permission(code={self.code})>"


class UserRole(Base):
    __tablename__ = "user_roles"
    __table_args__ = (
        UniqueConstraint("user_id", "role_id", name="uq_user_role"),
    )

    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    role_id: Mapped[int] = mapped_column(Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True, index=True)


class RolePermission(Base):
    __tablename__ = "role_permissions"
    __table_args__ = (
        UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),
    )

    role_id: Mapped[int] = mapped_column(Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True)
    permission_id: Mapped[int] = mapped_column(Integer, ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True, index=True)
