from sqlalchemy import Numeric, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from finassist.db import Base


class InvestmentAsset(Base):
    __tablename__ = "investment_assets"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    user_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False, index=True)
    symbol: Mapped[str | None] = mapped_column(String, nullable=True)
    current_value: Mapped[float | None] = mapped_column(Numeric(16, 2), nullable=True)
    total_value: Mapped[float | None] = mapped_column(Numeric(16, 2), nullable=True)
    cost_basis: Mapped[float | None] = mapped_column(Numeric(16, 2), nullable=True)
