from typing import Any
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, JSON
from .db import Base

class KVEntry(Base):
    __tablename__ = "kv_store"
    key: Mapped[str] = mapped_column(String(255), primary_key=True)  # e.g. project:PRJ-001
    value: Mapped[Any] = mapped_column(JSON)
