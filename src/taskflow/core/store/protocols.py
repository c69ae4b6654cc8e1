"""Store Protocol 接口定义

定义 UserStore、TaskStore、TeamStore 的抽象接口，
使用 Python Protocol 实现结构化子类型（duck typing）。
服务层只依赖这些接口，SQLite 实现见同目录下各模块。
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol

from ..models.task import Task
from ..models.team import TeamList
from ..models.user import User


class UserStore(Protocol):
    """用户目录接口"""

    async def create_user(self, user: User) -> None:
        """创建用户记录"""
        ...

    async def get_user(self, user_id: str) -> User | None:
        """根据 user_id 查询"""
        ...

    async def get_user_by_email(self, email: str) -> User | None:
        """根据邮箱查询"""
        ...

    async def get_users(self, user_ids: Iterable[str]) -> dict[str, User]:
        """批量查询"""
        ...

    async def list_users(self) -> list[User]:
        """列出全部用户"""
        ...


class TaskStore(Protocol):
    """Task 存储接口"""

    async def create_task(self, task: Task) -> None:
        """创建任务记录"""
        ...

    async def get_task(self, task_id: str) -> Task | None:
        """根据 task_id 查询任务"""
        ...

    async def list_visible_tasks(
        self,
        user_id: str,
        status: str | None = None,
        priority: str | None = None,
    ) -> list[Task]:
        """查询对 user_id 可见的任务"""
        ...

    async def update_task(self, task: Task) -> None:
        """覆盖任务可变字段"""
        ...

    async def delete_task(self, task_id: str) -> bool:
        """删除任务"""
        ...


class TeamStore(Protocol):
    """个人团队列表接口"""

    async def get_team(self, owner_id: str) -> TeamList | None:
        """查询团队列表"""
        ...

    async def create_team(self, owner_id: str, now: datetime) -> None:
        """创建空团队列表（幂等）"""
        ...

    async def add_member(self, owner_id: str, member_id: str, now: datetime) -> None:
        """追加成员"""
        ...

    async def remove_member(self, owner_id: str, member_id: str, now: datetime) -> bool:
        """移除成员"""
        ...

    async def list_members(self, owner_id: str) -> list[User]:
        """返回成员的用户记录"""
        ...
