# app/db/models/f1_race.py
from sqlalchemy import Integer, String, Boolean, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from app.db.session import Base

class F1Race(Base):
    __tablename__ = "f1_races"
    __table_args__ = (
        UniqueConstraint("season_year", "week_number", name="uq_season_week"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    season_year: Mapped[int] = mapped_column(Integer, nullable=False)
    week_number: Mapped[int] = mapped_column(Integer, nullable=False)  # 1–24
    name: Mapped[str] = mapped_column(String, nullable=False)
    circuit_name: Mapped[str | None] = mapped_column(String, nullable=True)
    country: Mapped[str | None] = mapped_column(String, nullable=True)
    qualifying_datetime: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    race_datetime: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    has_sprint: Mapped[bool] = mapped_column(Boolean, default=False)
    sprint_qualifying_datetime: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
