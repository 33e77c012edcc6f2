from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, JSON, Uuid
from sqlalchemy.orm import relationship
import uuid
from models.base import Base, utcnow


class DataRow(Base):
    """
    One parsed CSV record owned by a DataSource.

    json_data maps header -> string value. Every row of a source shares the
    header set computed when its CSV was parsed; the schema does not enforce it.
    """
    __tablename__ = "data_rows"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    data_source_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("data_sources.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Plain JSON (not JSONB) so header order survives the round trip
    json_data = Column(JSON, nullable=False)

    # Position of the record in its source CSV (0-based), keeps preview and export in file order
    row_index = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    data_source = relationship("DataSource", back_populates="rows")

    __table_args__ = (
        Index("idx_data_rows_data_source_id", "data_source_id"),
        Index("idx_data_rows_created_at", "created_at"),
    )
