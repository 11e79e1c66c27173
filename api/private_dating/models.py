from sqlalchemy import Column, DateTime, Index, String, Text, func

from .database import Base


class EngineEvent(Base):
    __tablename__ = "engine_event"

    id = Column(String(36), primary_key=True)
    event_name = Column(String(64), nullable=False)
    payload = Column(Text, nullable=False, default="{}")
    emitted_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        Index("idx_engine_event_name", "event_name"),
        Index("idx_engine_event_emitted_at", "emitted_at"),
    )
