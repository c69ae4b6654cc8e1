"""CLI 入口模块 -- python -m taskflow.core <command>

支持的命令：
  init-db                 在配置的路径创建/升级数据库
  add-user <name> <email> 登记用户并输出 user_id
"""

import asyncio
import sys
from datetime import UTC, datetime

import aiosqlite
from ulid import ULID

from .config import get_db_path
from .models import User, normalize_email

_USAGE = """用法: python -m taskflow.core <command>
命令:
  init-db                 在配置的路径创建/升级数据库
  add-user <name> <email> 登记用户并输出 user_id"""


def main(argv: list[str] | None = None) -> int:
    """CLI 主入口，返回进程退出码"""
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print(_USAGE)
        return 1

    command = args[0]

    if command == "init-db":
        asyncio.run(init_database())
        return 0
    if command == "add-user":
        if len(args) != 3:
            print("用法: python -m taskflow.core add-user <name> <email>")
            return 1
        return asyncio.run(add_user(args[1], args[2]))

    print(f"未知命令: {command}")
    print("可用命令: init-db, add-user")
    return 1


async def init_database() -> None:
    """执行数据库初始化"""
    from .store import create_store_group

    db_path = get_db_path()
    print(f"数据库路径: {db_path}")

    store_group = await create_store_group(db_path)
    await store_group.conn.close()
    print("初始化完成")


async def add_user(name: str, email: str) -> int:
    """登记用户；邮箱已存在时返回 1"""
    from .store import atomic, create_store_group

    email = normalize_email(email)
    if not name.strip() or "@" not in email:
        print("name 与合法的 email 均为必填")
        return 1

    store_group = await create_store_group(get_db_path())
    try:
        user = User(
            user_id=str(ULID()),
            name=name.strip(),
            email=email,
            created_at=datetime.now(UTC),
        )
        try:
            async with atomic(store_group.conn):
                await store_group.user_store.create_user(user)
        except aiosqlite.IntegrityError:
            print(f"邮箱已被登记: {email}")
            return 1
        print(user.user_id)
        return 0
    finally:
        await store_group.conn.close()


if __name__ == "__main__":
    sys.exit(main())
