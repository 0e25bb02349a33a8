from datetime import datetime
from sqlalchemy import String, JSON, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from app.db.base import Base

class KeyValueDocument(Base):
    """
    One JSON blob per key. The whole price document lives in a single row;
    writers replace the value wholesale.
    """
    __tablename__ = "kv_documents"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[dict] = mapped_column(JSON, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
