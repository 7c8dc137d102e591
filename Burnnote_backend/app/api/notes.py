import secrets
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.exceptions import NotFound
from app.security import Tenant, require_tenant
from app.services import note_store
from schemas.notes import (
    NoteSaveRequest,
    NoteSaveResponse,
    NoteResponse,
    NoteDeleteRequest,
    SuccessResponse,
    SharedNoteResponse,
)

router = APIRouter()


def _new_public_id() -> str:
    return secrets.token_urlsafe(16)


@router.post("/save", response_model=NoteSaveResponse, response_model_exclude_none=True)
async def save_note(
    payload: NoteSaveRequest,
    tenant: Tenant = Depends(require_tenant),
    db: AsyncSession = Depends(get_db),
):
    public_id = None
    if payload.is_share:
        # 前端未提供分享口令时由服务端生成
        public_id = payload.public_id or _new_public_id()
    try:
        await note_store.save_note(
            db,
            payload.content,
            is_share=payload.is_share,
            public_id=public_id,
            owner=tenant.owner,
        )
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail="public_id already in use")
    return NoteSaveResponse(success=True, public_id=public_id)


@router.get("/list", response_model=List[NoteResponse])
async def list_notes(
    tenant: Tenant = Depends(require_tenant),
    db: AsyncSession = Depends(get_db),
):
    notes = await note_store.list_notes(db, owner=tenant.owner)
    return [NoteResponse.model_validate(n) for n in notes]


@router.post("/delete", response_model=SuccessResponse)
async def delete_note(
    payload: NoteDeleteRequest,
    tenant: Tenant = Depends(require_tenant),
    db: AsyncSession = Depends(get_db),
):
    # 删除不存在或他人的笔记同样返回成功，不影响任何行
    await note_store.delete_note(db, payload.id, owner=tenant.owner)
    return SuccessResponse(success=True)


@router.get("/share/{public_id}", response_model=SharedNoteResponse)
async def read_shared_note(public_id: str, db: AsyncSession = Depends(get_db)):
    content = await note_store.read_and_burn(db, public_id)
    if content is None:
        raise NotFound("Note not found or already read")
    return SharedNoteResponse(content=content)
