from sqlalchemy import Column, Integer, String, DateTime, Text, Boolean
from sqlalchemy.sql import func
from app.database import Base

class Note(Base):
    __tablename__ = "notes"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    content = Column(Text, nullable=False)
    is_share = Column(Boolean, nullable=False, default=False)
    public_id = Column(String, unique=True, index=True, nullable=True)  # 仅分享笔记有值
    owner = Column(String(64), index=True, nullable=True)  # 凭证的 sha256，不保存凭证本身
    created_at = Column(DateTime(timezone=True), server_default=func.now())
