from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from datetime import datetime
from typing import Annotated, Optional

# 与 secrets.token_urlsafe 的字符集一致，保证能作为 /share/{public_id} 的单段路径
PUBLIC_ID_PATTERN = r"^[A-Za-z0-9_-]+$"

class NoteSaveRequest(BaseModel):
    content: str
    is_share: bool = False
    public_id: Optional[str] = Field(default=None, min_length=1, max_length=128, pattern=PUBLIC_ID_PATTERN)

class NoteSaveResponse(BaseModel):
    success: bool = True
    public_id: Optional[str] = None

class NoteResponse(BaseModel):
    id: int
    content: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class NoteDeleteRequest(BaseModel):
    id: int

class SuccessResponse(BaseModel):
    success: bool = True

class SharedNoteResponse(BaseModel):
    content: str

class SummaryRequest(BaseModel):
    text: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

class SummaryResponse(BaseModel):
    summary: str
