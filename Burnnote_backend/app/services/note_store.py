import logging
from typing import Sequence

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.security import mask_tenant_id
from models.notes import Note

logger = logging.getLogger("burnnote.notes")


async def save_note(
    db: AsyncSession,
    content: str,
    is_share: bool = False,
    public_id: str | None = None,
    owner: str | None = None,
) -> Note:
    if content is None:
        raise ValueError("content is required")
    if is_share and not public_id:
        raise ValueError("public_id is required for shared notes")
    note = Note(
        content=content,
        is_share=bool(is_share),
        public_id=public_id if is_share else None,
        owner=owner,
    )
    db.add(note)
    await db.commit()
    await db.refresh(note)
    logger.info("note saved id=%s share=%s tenant=%s", note.id, int(note.is_share), mask_tenant_id(owner))
    return note


async def list_notes(db: AsyncSession, owner: str | None = None) -> Sequence[Note]:
    query = select(Note).where(Note.is_share.is_(False))
    if owner is not None:
        query = query.where(Note.owner == owner)
    result = await db.execute(query.order_by(Note.id.desc()))
    return result.scalars().all()


async def delete_note(db: AsyncSession, note_id: int, owner: str | None = None) -> int:
    stmt = delete(Note).where(Note.id == note_id).execution_options(synchronize_session=False)
    if owner is not None:
        stmt = stmt.where(Note.owner == owner)
    result = await db.execute(stmt)
    await db.commit()
    if result.rowcount:
        logger.info("note deleted id=%s tenant=%s", note_id, mask_tenant_id(owner))
    return result.rowcount or 0


async def read_and_burn(db: AsyncSession, public_id: str) -> str | None:
    # 查询与删除必须是同一条语句，并发读取同一个 public_id 时只有一个能拿到内容
    stmt = (
        delete(Note)
        .where(Note.public_id == public_id, Note.is_share.is_(True))
        .returning(Note.content)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    content = result.scalar_one_or_none()
    await db.commit()
    if content is not None:
        logger.info("shared note delivered and burned")
    return content
