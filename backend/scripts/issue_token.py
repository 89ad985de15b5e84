"""
为指定用户签发开发用 access token。

用法:
    python scripts/issue_token.py --user-id 1 [--minutes 60]
"""
from __future__ import annotations

import argparse
import os
import sys

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from henwiki.core.config import settings  # noqa: E402
from henwiki.utils.security import create_access_token  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description="签发开发用 access token")
    parser.add_argument("--user-id", type=int, required=True, help="用户 ID")
    parser.add_argument("--minutes", type=int, default=None, help="有效期（分钟）")
    args = parser.parse_args()

    if settings.is_production:
        print("[ERROR] 生产环境禁止使用该脚本签发 token。")
        sys.exit(1)

    print(create_access_token(args.user_id, expires_minutes=args.minutes))


if __name__ == "__main__":
    main()
