"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、标题长度上限等可配置常量。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("TASKFLOW_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "TASKFLOW_DB_PATH",
        str(_get_base_dir() / "sqlite" / "taskflow.db"),
    )


# 任务标题最大长度
TITLE_MAX_LENGTH: int = int(os.environ.get("TASKFLOW_TITLE_MAX_LENGTH", "200"))
