"""任务访问控制 -- 可见性与字段级修改规则

所有判定都是纯函数，只依赖 task 上的两个关系字段（created_by / assignee_id），
不存在角色缓存或 ACL 表：重新指派后权限立即随之变化。

角色与权限：
- CREATOR / BOTH: 可查看、可修改全部可变字段、可删除
- ASSIGNEE: 可查看、只能修改 status，不可删除
- NONE: 无任何权限
"""

from .models.enums import TaskRole
from .models.task import Task

# 可由请求修改的字段（created_by / 时间戳不在其中）
MUTABLE_FIELDS: frozenset[str] = frozenset(
    {"title", "description", "due_date", "priority", "status", "assignee_id"}
)

ASSIGNEE_MUTABLE_FIELDS: frozenset[str] = frozenset({"status"})

_EDITABLE_FIELDS: dict[TaskRole, frozenset[str]] = {
    TaskRole.CREATOR: MUTABLE_FIELDS,
    TaskRole.BOTH: MUTABLE_FIELDS,
    TaskRole.ASSIGNEE: ASSIGNEE_MUTABLE_FIELDS,
    TaskRole.NONE: frozenset(),
}


def role_of(task: Task, user_id: str) -> TaskRole:
    """计算 user_id 相对 task 的角色

    Args:
        task: 当前持久化的任务
        user_id: 已认证的请求者

    Returns:
        TaskRole 四值之一
    """
    is_creator = task.created_by == user_id
    is_assignee = task.assignee_id is not None and task.assignee_id == user_id

    if is_creator and is_assignee:
        return TaskRole.BOTH
    if is_creator:
        return TaskRole.CREATOR
    if is_assignee:
        return TaskRole.ASSIGNEE
    return TaskRole.NONE


def is_involved(task: Task, user_id: str) -> bool:
    """创建者或被指派人"""
    return role_of(task, user_id) is not TaskRole.NONE


def can_view(task: Task, user_id: str) -> bool:
    return is_involved(task, user_id)


def can_update(task: Task, user_id: str) -> bool:
    return is_involved(task, user_id)


def can_delete(task: Task, user_id: str) -> bool:
    """只有创建者可以删除（被指派人即使可见也不行）"""
    return role_of(task, user_id) in (TaskRole.CREATOR, TaskRole.BOTH)


def editable_fields(role: TaskRole) -> frozenset[str]:
    """返回该角色允许修改的字段集合"""
    return _EDITABLE_FIELDS[role]


def filter_changes(role: TaskRole, changes: dict[str, object]) -> dict[str, object]:
    """丢弃角色无权修改的字段

    越权字段被静默忽略而不是拒绝整个请求。
    """
    allowed = editable_fields(role)
    return {field: value for field, value in changes.items() if field in allowed}


def is_visible_to(task: Task, user_id: str) -> bool:
    """列表可见性谓词：created_by == user OR assignee_id == user

    与 SqliteTaskStore.list_visible_tasks 的 SQL 条件保持一致。
    """
    return task.created_by == user_id or (
        task.assignee_id is not None and task.assignee_id == user_id
    )
