from sqlalchemy import Column, DateTime, func
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for knowledge tables"""
    pass


class CreatedAtMixin:
    """Chunk rows are write-once; only the insert time is tracked"""
    created_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)
