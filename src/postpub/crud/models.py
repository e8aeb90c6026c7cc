"""Database table definitions for topic history"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime, String, Text
from sqlmodel import Field, SQLModel


class TopicRecord(SQLModel, table=True):
    """A published (or scheduled) post title, keyed by its normalized fingerprint"""
    __tablename__ = "topic_history"
    id: Optional[int] = Field(default=None, primary_key=True)
    fingerprint: str = Field(..., sa_column=Column(String(64), nullable=False, unique=True, index=True))
    title: str = Field(..., sa_column=Column(Text, nullable=False))
    keyword: str = Field(default="", nullable=False)
    persona: Optional[str] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
