from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from crm.database import Base


class Document(Base):
    """A schema-less JSON document in a per-user collection."""

    __tablename__ = "documents"
    __table_args__ = (Index("ix_documents_owner_collection", "owner_id", "collection"),)

    # Insertion order within a collection follows seq
    seq: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    doc_id: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    owner_id: Mapped[str] = mapped_column(String(128), nullable=False)
    collection: Mapped[str] = mapped_column(String(32), nullable=False)
    data_json: Mapped[str] = mapped_column(Text, nullable=False, default="{}")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=func.now(), onupdate=func.now()
    )
