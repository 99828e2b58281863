"""Investment model for buy/sell records."""

import enum
import uuid
from decimal import Decimal

from sqlalchemy import ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from invest_api.db.base import Base, TimestampMixin
from invest_api.models.owner import Owner


class OperationKind(str, enum.Enum):
    """Closed set of operations; stored lowercase."""

    BUY = "buy"
    SELL = "sell"


class Investment(Base, TimestampMixin):
    """A single buy or sell of an instrument by an owner."""

    __tablename__ = "investments"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("owners.id", ondelete="RESTRICT"), index=True
    )
    category: Mapped[str] = mapped_column(String(50), index=True)
    code: Mapped[str] = mapped_column(String(20))
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2))
    operation: Mapped[str] = mapped_column(String(10))

    # Joined so responses can read owner.national_id without a lazy load
    owner: Mapped[Owner] = relationship(Owner, back_populates="investments", lazy="joined")

    @property
    def national_id(self) -> str:
        """National ID of the owning person."""
        return self.owner.national_id
