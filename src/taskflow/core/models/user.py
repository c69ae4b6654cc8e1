"""User Domain Model

用户目录记录。credential 对核心层不透明，永不出现在对外响应中。
"""

from datetime import datetime

from pydantic import BaseModel, Field


class User(BaseModel):
    """用户目录记录"""

    user_id: str = Field(description="唯一标识，ULID 格式")
    name: str = Field(description="显示名称")
    email: str = Field(description="邮箱（唯一，已规范化为小写）")
    credential: str = Field(default="", repr=False, description="凭据材料（不透明）")
    created_at: datetime = Field(description="注册时间")

    def summary(self) -> "UserSummary":
        return UserSummary(user_id=self.user_id, name=self.name, email=self.email)


class UserSummary(BaseModel):
    """嵌入任务 / 团队响应中的用户摘要"""

    user_id: str
    name: str = ""
    email: str = ""


def normalize_email(email: str) -> str:
    """邮箱规范化：去首尾空白 + 小写"""
    return email.strip().lower()
