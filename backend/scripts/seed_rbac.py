"""
幂等写入权限目录与四个系统角色（super_admin / admin / editor / user）。

用法:
    python scripts/seed_rbac.py
"""
from __future__ import annotations

import asyncio
import os
import sys

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from henwiki.core import Database, setup_logging  # noqa: E402
from henwiki.services.rbac import seed_rbac_catalog  # noqa: E402


async def main() -> None:
    setup_logging()
    database = Database()
    database.init()
    try:
        async with database.session() as session:
            report = await seed_rbac_catalog(session)
        print(f"新增权限: {report.permissions_created}，新增系统角色: {report.roles_created}")
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(main())
