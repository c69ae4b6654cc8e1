"""枚举定义

包含 TaskPriority、TaskStatus 以及任务角色 TaskRole。
TaskRole 不落库，每次请求根据 task 的 created_by / assignee_id 重新计算。
"""

from enum import StrEnum


class TaskPriority(StrEnum):
    """任务优先级"""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TaskStatus(StrEnum):
    """任务状态（看板列）"""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskRole(StrEnum):
    """请求者相对某个任务的角色"""

    CREATOR = "creator"
    ASSIGNEE = "assignee"
    # 自己创建并指派给自己
    BOTH = "both"
    NONE = "none"
