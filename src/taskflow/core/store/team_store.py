"""TeamStore SQLite 实现

teams 每个 owner 一行，team_members 以 (owner_id, member_id) 为主键，
在存储层保证同一成员至多出现一次。
"""

from datetime import datetime

import aiosqlite

from ..models.team import TeamList
from ..models.user import User


class SqliteTeamStore:
    """TeamStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def get_team(self, owner_id: str) -> TeamList | None:
        """查询 owner 的团队列表，不存在返回 None"""
        cursor = await self._conn.execute(
            "SELECT owner_id, created_at, updated_at FROM teams WHERE owner_id = ?",
            (owner_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None

        cursor = await self._conn.execute(
            """
            SELECT member_id FROM team_members
            WHERE owner_id = ?
            ORDER BY added_at, rowid
            """,
            (owner_id,),
        )
        members = await cursor.fetchall()
        return TeamList(
            owner_id=row[0],
            member_ids=[m[0] for m in members],
            created_at=datetime.fromisoformat(row[1]),
            updated_at=datetime.fromisoformat(row[2]),
        )

    async def create_team(self, owner_id: str, now: datetime) -> None:
        """创建空团队列表（已存在时不做任何事）"""
        await self._conn.execute(
            """
            INSERT OR IGNORE INTO teams (owner_id, created_at, updated_at)
            VALUES (?, ?, ?)
            """,
            (owner_id, now.isoformat(), now.isoformat()),
        )

    async def add_member(self, owner_id: str, member_id: str, now: datetime) -> None:
        """追加成员（重复时抛出 aiosqlite.IntegrityError）"""
        await self._conn.execute(
            "INSERT INTO team_members (owner_id, member_id, added_at) VALUES (?, ?, ?)",
            (owner_id, member_id, now.isoformat()),
        )
        await self._touch(owner_id, now)

    async def remove_member(self, owner_id: str, member_id: str, now: datetime) -> bool:
        """移除成员，返回是否确实移除了一行"""
        cursor = await self._conn.execute(
            "DELETE FROM team_members WHERE owner_id = ? AND member_id = ?",
            (owner_id, member_id),
        )
        removed = cursor.rowcount > 0
        if removed:
            await self._touch(owner_id, now)
        return removed

    async def list_members(self, owner_id: str) -> list[User]:
        """按加入顺序返回成员的用户记录"""
        cursor = await self._conn.execute(
            """
            SELECT u.user_id, u.name, u.email, u.credential, u.created_at
            FROM team_members m
            JOIN users u ON u.user_id = m.member_id
            WHERE m.owner_id = ?
            ORDER BY m.added_at, m.rowid
            """,
            (owner_id,),
        )
        rows = await cursor.fetchall()
        return [
            User(
                user_id=row[0],
                name=row[1],
                email=row[2],
                credential=row[3],
                created_at=datetime.fromisoformat(row[4]),
            )
            for row in rows
        ]

    async def _touch(self, owner_id: str, now: datetime) -> None:
        await self._conn.execute(
            "UPDATE teams SET updated_at = ? WHERE owner_id = ?",
            (now.isoformat(), owner_id),
        )
