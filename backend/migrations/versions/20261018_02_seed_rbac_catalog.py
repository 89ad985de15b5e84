"""seed permission catalog and system roles

Revision ID: 20261018_02
Revises: 20261018_01
Create Date: 2026-10-18
"""
import sqlalchemy as sa
from alembic import op

from henwiki.constants.permissions import (
    PERMISSION_REGISTRY,
    SYSTEM_ROLES,
    role_permission_codes,
)

# revision identifiers, used by Alembic.
revision = "20261018_02"
down_revision = "20261018_01"
branch_labels = None
depends_on = None


permission_table = sa.table(
    "permissions",
    sa.column("id", sa.Integer),
    sa.column("code", sa.String),
    sa.column("name", sa.String),
    sa.column("module", sa.String),
    sa.column("resource", sa.String),
    sa.column("action", sa.String),
)

role_table = sa.table(
    "roles",
    sa.column("id", sa.Integer),
    sa.column("code", sa.String),
    sa.column("name", sa.String),
    sa.column("description", sa.Text),
    sa.column("level", sa.Integer),
    sa.column("is_system", sa.Boolean),
)

role_permission_table = sa.table(
    "role_permissions",
    sa.column("role_id", sa.Integer),
    sa.column("permission_id", sa.Integer),
)


def upgrade() -> None:
    conn = op.get_bind()

    # 1) 插入权限目录（幂等）
    existing_perms = dict(
        conn.execute(sa.select(permission_table.c.code, permission_table.c.id)).fetchall()
    )
    for item in PERMISSION_REGISTRY:
        if item.code in existing_perms:
            continue
        conn.execute(
            sa.insert(permission_table).values(
                code=item.code,
                name=item.name,
                module=item.module,
                resource=item.resource,
                action=item.action,
            )
        )
    existing_perms = dict(
        conn.execute(sa.select(permission_table.c.code, permission_table.c.id)).fetchall()
    )

    # 2) 创建系统角色（幂等）
    for role in SYSTEM_ROLES:
        role_id = conn.execute(
            sa.select(role_table.c.id).where(role_table.c.code == role.code)
        ).scalar_one_or_none()
        if role_id is None:
            conn.execute(
                sa.insert(role_table).values(
                    code=role.code,
                    name=role.name,
                    description=role.description,
                    level=role.level,
                    is_system=True,
                )
            )
            role_id = conn.execute(
                sa.select(role_table.c.id).where(role_table.c.code == role.code)
            ).scalar_one()

        # 3) 绑定角色与权限（幂等）
        granted = set(
            conn.execute(
                sa.select(role_permission_table.c.permission_id).where(
                    role_permission_table.c.role_id == role_id
                )
            ).scalars()
        )
        for code in role_permission_codes(role.code):
            perm_id = existing_perms[code]
            if perm_id in granted:
                continue
            conn.execute(
                sa.insert(role_permission_table).values(role_id=role_id, permission_id=perm_id)
            )


def downgrade() -> None:
    conn = op.get_bind()
    role_codes = [role.code for role in SYSTEM_ROLES]
    permission_codes = [item.code for item in PERMISSION_REGISTRY]

    role_ids = sa.select(role_table.c.id).where(role_table.c.code.in_(role_codes))
    conn.execute(sa.delete(role_permission_table).where(role_permission_table.c.role_id.in_(role_ids)))
    conn.execute(sa.delete(role_table).where(role_table.c.code.in_(role_codes)))
    conn.execute(sa.delete(permission_table).where(permission_table.c.code.in_(permission_codes)))
