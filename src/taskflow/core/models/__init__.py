"""TaskFlow Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import TaskPriority, TaskRole, TaskStatus
from .task import Task, TaskChanges, TaskDetail, TaskDraft, TaskPatch
from .team import TeamList
from .user import User, UserSummary, normalize_email

__all__ = [
    # 枚举
    "TaskPriority",
    "TaskStatus",
    "TaskRole",
    # Task
    "Task",
    "TaskDetail",
    "TaskDraft",
    "TaskPatch",
    "TaskChanges",
    # User
    "User",
    "UserSummary",
    "normalize_email",
    # Team
    "TeamList",
]
