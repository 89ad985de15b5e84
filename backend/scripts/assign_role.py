"""
按邮箱为用户追加一个角色（保留用户已有角色）。

用法:
    python scripts/assign_role.py --email admin@example.com --role super_admin
"""
from __future__ import annotations

import argparse
import asyncio
import os
import sys

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from henwiki.core import Database, setup_logging  # noqa: E402
from henwiki.core.exceptions import RBACError  # noqa: E402
from henwiki.repositories import PermissionRepository, RoleRepository, UserRepository  # noqa: E402
from henwiki.services.rbac import AssignmentService  # noqa: E402


async def assign(email: str, role_code: str) -> int:
    database = Database()
    database.init()
    try:
        async with database.session() as session:
            users = UserRepository(session)
            roles = RoleRepository(session)

            user = await users.get_by_email(email)
            if user is None:
                print(f"[ERROR] 用户不存在: {email}")
                return 1
            role = await roles.find_by_code(role_code)
            if role is None:
                print(f"[ERROR] 角色不存在: {role_code}")
                return 1

            current = [r.id for r in await roles.list_for_user(user.id)]
            if role.id in current:
                print(f"用户 {email} 已持有角色 {role_code}，无需修改。")
                return 0

            service = AssignmentService(session, roles, PermissionRepository(session), users)
            try:
                await service.assign_roles_to_user(user.id, [*current, role.id])
            except RBACError as exc:
                print(f"[ERROR] {exc.message}")
                return 1

            held = [r.code for r in await roles.list_for_user(user.id)]
            print(f"已为 {email} 分配角色 {role_code}，当前角色: {', '.join(held)}")
            return 0
    finally:
        await database.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="按邮箱为用户追加角色")
    parser.add_argument("--email", required=True, help="用户邮箱")
    parser.add_argument("--role", default="super_admin", help="角色代码，默认 super_admin")
    args = parser.parse_args()

    setup_logging()
    sys.exit(asyncio.run(assign(args.email, args.role)))


if __name__ == "__main__":
    main()
