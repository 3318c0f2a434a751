from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class Message(Base):
    __tablename__ = "messages"
    __table_args__ = (Index("ix_messages_group_sent", "group_id", "sent_at"),)

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    # group_id / sender_id no cambian nunca tras crear
    group_id: Mapped[int] = mapped_column(ForeignKey("groups.id"), nullable=False, index=True)
    sender_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)

    content: Mapped[str] = mapped_column(Text, nullable=False)
    sent_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)  # UTC naive
    edited: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
