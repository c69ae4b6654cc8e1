"""TeamService -- 个人团队列表管理

团队列表只是指派时的候选名单：
- 单向且私有：A 把 B 加入自己的列表，不会把 A 加入 B 的列表
- 不授予任何任务权限（权限只由 created_by / assignee_id 决定）

同一 owner 的成员变更通过 owner 级 KeyedLock 串行化，
"读列表 -> 查重 -> 追加 -> 保存" 不会在进程内交错。
"""

from datetime import UTC, datetime

import aiosqlite
import structlog
from taskflow.core.exceptions import (
    DuplicateMemberError,
    InvalidOperationError,
    TeamNotFoundError,
    UserNotFoundError,
)
from taskflow.core.models import User, normalize_email
from taskflow.core.store import StoreGroup, atomic

from .keyed_lock import KeyedLock

log = structlog.get_logger()


class TeamService:
    """团队列表业务服务"""

    _owner_locks = KeyedLock()

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    async def get_team(self, owner_id: str) -> list[User]:
        """返回 owner 的成员列表，首次访问时创建空列表"""
        team = await self._stores.team_store.get_team(owner_id)
        if team is None:
            async with atomic(self._stores.conn):
                await self._stores.team_store.create_team(owner_id, datetime.now(UTC))
            log.info("team_created", owner_id=owner_id)
            return []
        return await self._stores.team_store.list_members(owner_id)

    async def add_member(self, owner_id: str, email: str) -> list[User]:
        """按邮箱把用户加入 owner 的团队列表

        Raises:
            UserNotFoundError: 该邮箱没有对应用户
            InvalidOperationError: 试图把自己加入自己的团队
            DuplicateMemberError: 用户已在列表中
        """
        user = await self._stores.user_store.get_user_by_email(normalize_email(email))
        if user is None:
            raise UserNotFoundError("User not found with this email")
        if user.user_id == owner_id:
            raise InvalidOperationError("Cannot add yourself to your team")

        async with self._owner_locks.hold(owner_id):
            now = datetime.now(UTC)
            team = await self._stores.team_store.get_team(owner_id)
            if team is not None and team.has_member(user.user_id):
                raise DuplicateMemberError(user.user_id)

            try:
                async with atomic(self._stores.conn):
                    if team is None:
                        await self._stores.team_store.create_team(owner_id, now)
                    await self._stores.team_store.add_member(owner_id, user.user_id, now)
            except aiosqlite.IntegrityError as e:
                # 跨进程并发写入同一成员：主键冲突按重复处理
                if self._is_member_conflict(e):
                    raise DuplicateMemberError(user.user_id) from e
                raise

        log.info("team_member_added", owner_id=owner_id, member_id=user.user_id)
        return await self._stores.team_store.list_members(owner_id)

    async def remove_member(self, owner_id: str, member_id: str) -> list[User]:
        """从 owner 的团队列表移除成员

        成员本就不在列表中时是 no-op，返回未变化的列表。

        Raises:
            TeamNotFoundError: owner 还没有团队列表
        """
        async with self._owner_locks.hold(owner_id):
            team = await self._stores.team_store.get_team(owner_id)
            if team is None:
                raise TeamNotFoundError(owner_id)

            if team.has_member(member_id):
                async with atomic(self._stores.conn):
                    await self._stores.team_store.remove_member(
                        owner_id, member_id, datetime.now(UTC)
                    )
                log.info("team_member_removed", owner_id=owner_id, member_id=member_id)

        return await self._stores.team_store.list_members(owner_id)

    @staticmethod
    def _is_member_conflict(error: Exception) -> bool:
        text = str(error)
        return "team_members.owner_id, team_members.member_id" in text
