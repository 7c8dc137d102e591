from datetime import datetime
from sqlalchemy import text


async def ensure_migrations_table(conn):
    await conn.execute(text(
        """
        CREATE TABLE IF NOT EXISTS schema_migrations (
            name TEXT PRIMARY KEY,
            applied_at TEXT DEFAULT (datetime('now'))
        )
        """
    ))


async def has_migration(conn, name: str) -> bool:
    result = await conn.execute(text("SELECT 1 FROM schema_migrations WHERE name = :name"), {"name": name})
    return result.first() is not None


async def mark_migration(conn, name: str):
    await conn.execute(text("INSERT INTO schema_migrations(name, applied_at) VALUES (:name, :applied_at)"), {
        "name": name,
        "applied_at": datetime.utcnow().isoformat()
    })


async def column_exists(conn, table: str, column: str) -> bool:
    result = await conn.execute(text(f"PRAGMA table_info({table})"))
    for row in result.mappings():
        if row.get("name") == column:
            return True
    return False


async def add_share_columns_to_notes(conn):
    # 早期数据库的 notes 表只有 id/content/created_at
    if not await column_exists(conn, "notes", "is_share"):
        await conn.execute(text("ALTER TABLE notes ADD COLUMN is_share BOOLEAN NOT NULL DEFAULT 0"))
    if not await column_exists(conn, "notes", "public_id"):
        await conn.execute(text("ALTER TABLE notes ADD COLUMN public_id VARCHAR"))
        await conn.execute(text(
            "CREATE UNIQUE INDEX IF NOT EXISTS ix_notes_public_id ON notes (public_id)"
        ))


async def add_owner_to_notes(conn):
    if await column_exists(conn, "notes", "owner"):
        return
    await conn.execute(text("ALTER TABLE notes ADD COLUMN owner VARCHAR(64)"))
    await conn.execute(text("CREATE INDEX IF NOT EXISTS ix_notes_owner ON notes (owner)"))


MIGRATIONS = [
    ("202501_add_share_columns_to_notes", add_share_columns_to_notes),
    ("202502_add_owner_to_notes", add_owner_to_notes),
]


async def run_migrations(conn):
    await ensure_migrations_table(conn)
    for name, handler in MIGRATIONS:
        if await has_migration(conn, name):
            continue
        await handler(conn)
        await mark_migration(conn, name)


async def count_unowned_notes(conn) -> int:
    result = await conn.execute(text(
        "SELECT COUNT(*) FROM notes WHERE owner IS NULL AND is_share = :is_share"
    ), {"is_share": False})
    return int(result.scalar() or 0)


async def adopt_unowned_notes(conn, owner: str) -> int:
    # 升级前的单租户私有笔记归属到旧版 ADMIN_KEY 对应的租户
    result = await conn.execute(text(
        "UPDATE notes SET owner = :owner WHERE owner IS NULL AND is_share = :is_share"
    ), {"owner": owner, "is_share": False})
    return result.rowcount or 0
