from datetime import date

from sqlalchemy import Date, Numeric, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from finassist.db import Base


class SavingsGoal(Base):
    __tablename__ = "savings_goals"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    user_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False, index=True)
    name: Mapped[str | None] = mapped_column(String, nullable=True)
    target_amount: Mapped[float | None] = mapped_column(Numeric(14, 2), nullable=True)
    current_amount: Mapped[float | None] = mapped_column(Numeric(14, 2), nullable=True)
    target_date: Mapped[date | None] = mapped_column(Date, nullable=True)
