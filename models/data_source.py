from sqlalchemy import Column, String, Text, Integer, DateTime, Index, Uuid
from sqlalchemy.orm import relationship
import uuid
from models.base import Base, utcnow


class DataSource(Base):
    """
    A registered remote CSV endpoint plus its ingestion metadata.

    Design:
    - url is unique across all sources (checked before insert, enforced by the index)
    - row_count and last_refresh are written only after an ingest completes
    - deleting a source cascades to its rows at the database level
    """
    __tablename__ = "data_sources"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    name = Column(Text, nullable=False)
    url = Column(Text, nullable=False, unique=True)
    description = Column(Text, nullable=True)

    # Ingestion metadata
    row_count = Column(Integer, nullable=False, default=0)
    last_refresh = Column(DateTime(timezone=True), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    rows = relationship(
        "DataRow",
        back_populates="data_source",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_data_sources_created_at", "created_at"),
    )
