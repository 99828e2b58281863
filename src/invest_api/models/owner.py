"""Owner model: the person an investment belongs to."""

import uuid
from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from invest_api.db.base import Base, TimestampMixin


class Owner(Base, TimestampMixin):
    """Investment owner, keyed naturally by an 11-digit national ID (CPF)."""

    __tablename__ = "owners"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    national_id: Mapped[str] = mapped_column(String(11), unique=True, index=True)
    name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    attributes: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    # Relationships
    investments: Mapped[list["Investment"]] = relationship(  # noqa: F821
        "Investment", back_populates="owner", passive_deletes="all"
    )
