from datetime import date

from sqlalchemy import Date, Numeric, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from finassist.db import Base


class LendBorrow(Base):
    __tablename__ = "lend_borrow"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    user_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False, index=True)
    person_name: Mapped[str | None] = mapped_column(String, nullable=True)
    amount: Mapped[float | None] = mapped_column(Numeric(14, 2), nullable=True)
    type: Mapped[str | None] = mapped_column(String, nullable=True)  # 'lent' | 'borrowed'
    status: Mapped[str | None] = mapped_column(String, nullable=True)  # 'active' | 'settled'
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
