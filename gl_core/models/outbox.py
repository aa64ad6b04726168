"""
Outbox model.

Domain events are written here in the same transaction as the
journal they describe. A separate dispatcher drains the table;
an event is visible to it exactly when its journal is visible
to readers.
"""

import uuid
from datetime import datetime

from sqlalchemy import String, DateTime, JSON, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from gl_core.models.base import Base


class OutboxEntry(Base):
    __tablename__ = "outbox"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    company_id: Mapped[str] = mapped_column(
        String(50), nullable=False, index=True
    )
    topic: Mapped[str] = mapped_column(String(100), nullable=False)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<OutboxEntry {self.topic} {self.id}>"
