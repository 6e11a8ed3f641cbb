# app/db/models/race_result.py
from sqlalchemy import Integer, String, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from datetime import datetime
from app.db.session import Base

class RaceResult(Base):
    __tablename__ = "race_results"
    __table_args__ = (
        # Un resultado por evento (carrera o sprint) de cada semana
        UniqueConstraint("season_year", "week_number", "event_type", name="uq_result_event"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    season_year: Mapped[int] = mapped_column(Integer, nullable=False)
    week_number: Mapped[int] = mapped_column(Integer, nullable=False)
    event_type: Mapped[str] = mapped_column(String, nullable=False, default="race")
    entered_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    # Relaciones
    positions: Mapped[list["RacePosition"]] = relationship(
        "RacePosition",
        back_populates="race_result",
        cascade="all, delete-orphan",
        order_by="RacePosition.position",
    )
