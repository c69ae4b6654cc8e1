"""TeamList Domain Model

每个 owner 至多一份团队列表；成员是 user_id 的集合（按加入顺序返回）。
团队成员关系是单向、私有的，仅作为指派候选，不授予任何任务权限。
"""

from datetime import datetime

from pydantic import BaseModel, Field


class TeamList(BaseModel):
    """个人团队列表"""

    owner_id: str = Field(description="列表所有者 user_id（唯一）")
    member_ids: list[str] = Field(default_factory=list, description="成员 user_id，按加入顺序")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="最近一次成员变更时间")

    def has_member(self, user_id: str) -> bool:
        return user_id in self.member_ids
