# app/db/models/prediction.py
from sqlalchemy import Integer, String, ForeignKey, Boolean, UniqueConstraint, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from app.db.session import Base
from datetime import datetime

class Prediction(Base):
    __tablename__ = "predictions"
    __table_args__ = (
        # Una sola predicción por usuario, liga, semana, evento y posición
        UniqueConstraint(
            "user_id", "league_id", "week_number", "event_type", "position",
            name="uq_user_league_week_event_position",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    league_id: Mapped[int] = mapped_column(Integer, ForeignKey("leagues.id"), nullable=False)
    week_number: Mapped[int] = mapped_column(Integer, nullable=False)
    event_type: Mapped[str] = mapped_column(String, nullable=False, default="race")  # race | sprint
    position: Mapped[int] = mapped_column(Integer, nullable=False)  # 1–20
    driver_id: Mapped[int] = mapped_column(Integer, ForeignKey("drivers.id"), nullable=False)

    # Rellenado por el proceso de puntuación
    points: Mapped[int] = mapped_column(Integer, default=0)
    position_difference: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_scored: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())

    # Relaciones
    user: Mapped["User"] = relationship("User", back_populates="predictions")
    league: Mapped["League"] = relationship("League", back_populates="predictions")
    driver: Mapped["Driver"] = relationship("Driver")
