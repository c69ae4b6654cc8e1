"""Task Domain Model

created_by 在创建时由服务层强制设为请求者，此后不可变；
assignee_id 是对 users 的弱引用，可为空。
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .enums import TaskPriority, TaskStatus
from .user import UserSummary


class Task(BaseModel):
    """Task 数据模型（tasks 表的一行）"""

    task_id: str = Field(description="唯一标识，ULID 格式")
    title: str = Field(description="任务标题（非空）")
    description: str = Field(default="", description="任务描述")
    due_date: date = Field(description="截止日期（仅日期，无时区）")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="优先级")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="当前状态")
    assignee_id: str | None = Field(default=None, description="被指派人 user_id")
    created_by: str = Field(description="创建者 user_id（不可变）")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")


class TaskDetail(BaseModel):
    """任务 + 嵌入的用户摘要，对外展示用"""

    task: Task
    assignee: UserSummary | None = None
    creator: UserSummary


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class TaskDraft(BaseModel):
    """创建任务的输入

    客户端提交的 createdBy 等额外字段被忽略。
    必填项校验（title / due_date）由 TaskService 负责，以便统一抛出 TaskValidationError。
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str | None = None
    description: str | None = None
    due_date: date | None = None
    priority: TaskPriority | None = None
    status: TaskStatus | None = None
    assignee_id: str | None = None

    @field_validator("due_date", "assignee_id", "priority", "status", mode="before")
    @classmethod
    def normalize_blank(cls, value):
        return _blank_to_none(value)


class TaskPatch(BaseModel):
    """部分更新的原始输入

    字段值在这里不做类型校验：先按请求者角色丢弃无权修改的字段，
    剩余字段再由 TaskChanges 校验。被丢弃字段里的非法值因此不会拒绝整个请求。

    未提供或为空值的字段保持原值；assignee_id 例外：
    显式传 null（或空串）表示清除被指派人，完全省略才表示保持不变。
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: Any = None
    description: Any = None
    due_date: Any = None
    priority: Any = None
    status: Any = None
    assignee_id: Any = None

    @field_validator("*", mode="before")
    @classmethod
    def normalize_blank(cls, value):
        return _blank_to_none(value)

    @property
    def assignee_supplied(self) -> bool:
        """调用方是否显式提交了 assignee_id 字段（包括 null）"""
        return "assignee_id" in self.model_fields_set

    def requested_fields(self) -> dict[str, Any]:
        """{字段: 原始值}，只包含调用方实际要修改的字段

        空值字段视为未提供；assignee_id 只要出现在请求中就算提供（None 表示清除）。
        """
        fields = {
            name: getattr(self, name)
            for name in ("title", "description", "due_date", "priority", "status")
            if getattr(self, name) is not None
        }
        if self.assignee_supplied:
            fields["assignee_id"] = self.assignee_id
        return fields


class TaskChanges(BaseModel):
    """经过角色过滤后的字段变更（带类型）"""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, description="新标题（已去除首尾空白）")
    description: str | None = None
    due_date: date | None = None
    priority: TaskPriority | None = None
    status: TaskStatus | None = None
    assignee_id: str | None = Field(default=None, description="None 表示清除被指派人")

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: str | None) -> str | None:
        return value.strip() if value is not None else None

    def as_updates(self) -> dict[str, Any]:
        """只返回显式给出的字段，用于 Task.model_copy(update=...)"""
        return {name: getattr(self, name) for name in self.model_fields_set}
