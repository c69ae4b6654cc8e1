"""SQLite 数据库初始化

PRAGMA 配置 + 四张表 DDL + 索引创建。
使用 aiosqlite 异步操作。
"""

import aiosqlite

# users 表 DDL
_USERS_DDL = """
CREATE TABLE IF NOT EXISTS users (
    user_id     TEXT PRIMARY KEY,
    name        TEXT NOT NULL,
    email       TEXT NOT NULL UNIQUE,
    credential  TEXT NOT NULL DEFAULT '',
    created_at  TEXT NOT NULL
);
"""

# tasks 表 DDL
# assignee_id / created_by 是弱引用，不加外键约束
_TASKS_DDL = """
CREATE TABLE IF NOT EXISTS tasks (
    task_id      TEXT PRIMARY KEY,
    title        TEXT NOT NULL,
    description  TEXT NOT NULL DEFAULT '',
    due_date     TEXT NOT NULL,
    priority     TEXT NOT NULL DEFAULT 'medium',
    status       TEXT NOT NULL DEFAULT 'pending',
    assignee_id  TEXT,
    created_by   TEXT NOT NULL,
    created_at   TEXT NOT NULL,
    updated_at   TEXT NOT NULL
);
"""

_TASKS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_created_by ON tasks(created_by);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_assignee_id ON tasks(assignee_id);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_created_at ON tasks(created_at DESC);",
]

# teams 表 DDL（每个 owner 一行）
_TEAMS_DDL = """
CREATE TABLE IF NOT EXISTS teams (
    owner_id    TEXT PRIMARY KEY,
    created_at  TEXT NOT NULL,
    updated_at  TEXT NOT NULL
);
"""

# team_members 表 DDL：复合主键保证集合语义
_TEAM_MEMBERS_DDL = """
CREATE TABLE IF NOT EXISTS team_members (
    owner_id   TEXT NOT NULL,
    member_id  TEXT NOT NULL,
    added_at   TEXT NOT NULL,

    PRIMARY KEY (owner_id, member_id),
    FOREIGN KEY (owner_id) REFERENCES teams(owner_id) ON DELETE CASCADE,
    CHECK (owner_id != member_id)
);
"""

_TEAM_MEMBERS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_team_members_added ON team_members(owner_id, added_at);",
]


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 创建表 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
    """
    # 设置 PRAGMA
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA foreign_keys = ON;")
    await conn.execute("PRAGMA busy_timeout = 5000;")

    # 创建表
    await conn.execute(_USERS_DDL)
    await conn.execute(_TASKS_DDL)
    await conn.execute(_TEAMS_DDL)
    await conn.execute(_TEAM_MEMBERS_DDL)

    # 创建索引
    for idx_sql in _TASKS_INDEXES + _TEAM_MEMBERS_INDEXES:
        await conn.execute(idx_sql)

    await conn.commit()


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """验证 WAL 模式是否生效

    Returns:
        True 如果 WAL 模式已启用
    """
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"
