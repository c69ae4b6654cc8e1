"""UserStore SQLite 实现 -- 用户目录"""

from collections.abc import Iterable
from datetime import datetime

import aiosqlite

from ..models.user import User

_COLUMNS = "user_id, name, email, credential, created_at"


class SqliteUserStore:
    """UserStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_user(self, user: User) -> None:
        """创建用户记录（email 唯一约束冲突时抛出 aiosqlite.IntegrityError）"""
        await self._conn.execute(
            f"INSERT INTO users ({_COLUMNS}) VALUES (?, ?, ?, ?, ?)",
            (
                user.user_id,
                user.name,
                user.email,
                user.credential,
                user.created_at.isoformat(),
            ),
        )

    async def get_user(self, user_id: str) -> User | None:
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM users WHERE user_id = ?",
            (user_id,),
        )
        row = await cursor.fetchone()
        return self._row_to_user(row) if row is not None else None

    async def get_user_by_email(self, email: str) -> User | None:
        """按（已规范化的）邮箱查询"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM users WHERE email = ?",
            (email,),
        )
        row = await cursor.fetchone()
        return self._row_to_user(row) if row is not None else None

    async def get_users(self, user_ids: Iterable[str]) -> dict[str, User]:
        """批量查询，返回 user_id -> User；不存在的 id 不出现在结果中"""
        ids = sorted(set(user_ids))
        if not ids:
            return {}
        placeholders = ", ".join("?" for _ in ids)
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM users WHERE user_id IN ({placeholders})",
            ids,
        )
        rows = await cursor.fetchall()
        return {row[0]: self._row_to_user(row) for row in rows}

    async def list_users(self) -> list[User]:
        """按名称排序列出全部用户"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM users ORDER BY name COLLATE NOCASE, user_id"
        )
        rows = await cursor.fetchall()
        return [self._row_to_user(row) for row in rows]

    @staticmethod
    def _row_to_user(row: aiosqlite.Row) -> User:
        return User(
            user_id=row[0],
            name=row[1],
            email=row[2],
            credential=row[3],
            created_at=datetime.fromisoformat(row[4]),
        )
