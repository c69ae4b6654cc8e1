"""TaskService -- 任务查询/创建/修改/删除业务逻辑

每个操作都重新读取当前持久化状态，再交给 taskflow.core.access 判定权限：
1. 加载任务（不存在 -> TaskNotFoundError）
2. 计算请求者角色并授权（无权 -> AccessDeniedError）
3. 按角色过滤可改字段，再校验剩余字段
4. 在 atomic 事务内落盘

授权或校验失败时不会产生任何写入。
"""

from datetime import UTC, datetime
from typing import NoReturn

import structlog
from pydantic import ValidationError
from taskflow.core import access
from taskflow.core.config import TITLE_MAX_LENGTH
from taskflow.core.exceptions import (
    AccessDeniedError,
    TaskNotFoundError,
    TaskValidationError,
)
from taskflow.core.models import (
    Task,
    TaskChanges,
    TaskDetail,
    TaskDraft,
    TaskPatch,
    TaskPriority,
    TaskStatus,
    UserSummary,
)
from taskflow.core.store import StoreGroup, atomic
from ulid import ULID

from .keyed_lock import KeyedLock

log = structlog.get_logger()


class TaskService:
    """任务业务服务"""

    # task 级别锁，序列化同一任务的读-判定-写
    _task_locks = KeyedLock()

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    async def list_visible_tasks(
        self,
        user_id: str,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
    ) -> list[TaskDetail]:
        """列出 user_id 创建的或被指派给 user_id 的任务，按创建时间倒序

        从不拒绝：没有匹配时返回空列表。
        store 的查询结果再经过 access.is_visible_to 过滤一遍，
        两边不一致时只丢弃多出的任务并记录告警。
        """
        tasks = await self._stores.task_store.list_visible_tasks(
            user_id,
            status=status.value if status else None,
            priority=priority.value if priority else None,
        )
        visible = [t for t in tasks if access.is_visible_to(t, user_id)]
        if len(visible) != len(tasks):
            log.warning(
                "task_list_visibility_mismatch",
                user_id=user_id,
                dropped=[t.task_id for t in tasks if t not in visible],
            )
        return await self._to_details(visible)

    async def get_task(self, user_id: str, task_id: str) -> TaskDetail:
        """查询单个任务（仅创建者或被指派人可见）

        Raises:
            TaskNotFoundError: 任务不存在
            AccessDeniedError: 任务存在但请求者与之无关
        """
        task = await self._load_task(task_id)
        if not access.can_view(task, user_id):
            self._deny(task, user_id, "view")
        return (await self._to_details([task]))[0]

    async def create_task(self, user_id: str, draft: TaskDraft) -> TaskDetail:
        """创建任务

        created_by 强制为请求者，忽略客户端提交的任何创建者信息；
        assignee 可以是任意已注册用户，不要求在请求者的团队列表中。

        Raises:
            TaskValidationError: title / due_date 缺失，或 assignee 不存在
        """
        title = (draft.title or "").strip()
        if not title:
            raise TaskValidationError("Title is required")
        self._check_title_length(title)
        if draft.due_date is None:
            raise TaskValidationError("Due date is required")
        if draft.assignee_id is not None:
            await self._check_assignee_exists(draft.assignee_id)

        now = datetime.now(UTC)
        task = Task(
            task_id=str(ULID()),
            title=title,
            description=draft.description or "",
            due_date=draft.due_date,
            priority=draft.priority or TaskPriority.MEDIUM,
            status=draft.status or TaskStatus.PENDING,
            assignee_id=draft.assignee_id,
            created_by=user_id,
            created_at=now,
            updated_at=now,
        )

        async with atomic(self._stores.conn):
            await self._stores.task_store.create_task(task)

        log.info(
            "task_created",
            task_id=task.task_id,
            user_id=user_id,
            assignee_id=task.assignee_id,
        )
        return (await self._to_details([task]))[0]

    async def update_task(
        self,
        user_id: str,
        task_id: str,
        patch: TaskPatch,
    ) -> TaskDetail:
        """部分更新任务

        - 创建者：title/description/due_date/priority/status/assignee 均可改；
          只覆盖显式提供且非空的字段，assignee 可显式置空
        - 仅被指派人：只能改 status，其余字段（包括其中的非法值）静默丢弃

        Raises:
            TaskNotFoundError: 任务不存在
            AccessDeniedError: 请求者既不是创建者也不是被指派人
            TaskValidationError: 保留下来的字段值非法、新标题过长或新 assignee 不存在
        """
        async with self._task_locks.hold(task_id):
            task = await self._load_task(task_id)
            role = access.role_of(task, user_id)
            if not access.can_update(task, user_id):
                self._deny(task, user_id, "update")

            requested = patch.requested_fields()
            allowed = access.filter_changes(role, requested)
            ignored = sorted(set(requested) - set(allowed))
            if ignored:
                log.info(
                    "task_update_fields_ignored",
                    task_id=task_id,
                    user_id=user_id,
                    role=role.value,
                    ignored=ignored,
                )

            changes = self._validate_changes(allowed)
            if "title" in changes:
                self._check_title_length(changes["title"])
            new_assignee = changes.get("assignee_id")
            if new_assignee is not None and new_assignee != task.assignee_id:
                await self._check_assignee_exists(new_assignee)

            changes = {
                field: value
                for field, value in changes.items()
                if getattr(task, field) != value
            }
            if not changes:
                return (await self._to_details([task]))[0]

            updated = task.model_copy(
                update={**changes, "updated_at": datetime.now(UTC)}
            )
            async with atomic(self._stores.conn):
                await self._stores.task_store.update_task(updated)

        log.info(
            "task_updated",
            task_id=task_id,
            user_id=user_id,
            role=role.value,
            fields=sorted(changes),
        )
        return (await self._to_details([updated]))[0]

    async def delete_task(self, user_id: str, task_id: str) -> None:
        """删除任务（仅创建者）

        Raises:
            TaskNotFoundError: 任务不存在
            AccessDeniedError: 请求者不是创建者（被指派人也不行）
        """
        async with self._task_locks.hold(task_id):
            task = await self._load_task(task_id)
            if not access.can_delete(task, user_id):
                self._deny(task, user_id, "delete", "Only task creator can delete")

            async with atomic(self._stores.conn):
                await self._stores.task_store.delete_task(task_id)

        log.info("task_deleted", task_id=task_id, user_id=user_id)

    @staticmethod
    def _validate_changes(raw: dict[str, object]) -> dict[str, object]:
        """把角色过滤后的原始值校验为带类型的变更"""
        try:
            return TaskChanges.model_validate(raw).as_updates()
        except ValidationError as e:
            details = [
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in e.errors()
            ]
            raise TaskValidationError("; ".join(details)) from e

    async def _load_task(self, task_id: str) -> Task:
        task = await self._stores.task_store.get_task(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    @staticmethod
    def _deny(
        task: Task,
        user_id: str,
        operation: str,
        message: str = "Access denied",
    ) -> NoReturn:
        log.warning(
            "task_access_denied",
            task_id=task.task_id,
            user_id=user_id,
            operation=operation,
        )
        raise AccessDeniedError(message)

    @staticmethod
    def _check_title_length(title: str) -> None:
        if len(title) > TITLE_MAX_LENGTH:
            raise TaskValidationError(
                f"Title must be at most {TITLE_MAX_LENGTH} characters"
            )

    async def _check_assignee_exists(self, assignee_id: str) -> None:
        if await self._stores.user_store.get_user(assignee_id) is None:
            raise TaskValidationError(f"Assignee {assignee_id} does not exist")

    async def _to_details(self, tasks: list[Task]) -> list[TaskDetail]:
        """为任务嵌入创建者 / 被指派人摘要

        悬空引用（用户记录缺失）只展示 user_id。
        """
        user_ids = {t.created_by for t in tasks}
        user_ids.update(t.assignee_id for t in tasks if t.assignee_id)
        users = await self._stores.user_store.get_users(user_ids)

        def summary(uid: str) -> UserSummary:
            user = users.get(uid)
            return user.summary() if user else UserSummary(user_id=uid)

        return [
            TaskDetail(
                task=t,
                creator=summary(t.created_by),
                assignee=summary(t.assignee_id) if t.assignee_id else None,
            )
            for t in tasks
        ]
