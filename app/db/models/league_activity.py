# app/db/models/league_activity.py
from sqlalchemy import Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from datetime import datetime
from app.db.session import Base

class LeagueActivity(Base):
    __tablename__ = "league_activities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    league_id: Mapped[int] = mapped_column(Integer, ForeignKey("leagues.id"), index=True, nullable=False)
    user_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("users.id"), nullable=True)  # None = sistema
    # pick_created | pick_changed | user_joined | race_result_processed
    activity_type: Mapped[str] = mapped_column(String, nullable=False)
    week_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    event_type: Mapped[str | None] = mapped_column(String, nullable=True)
    position: Mapped[int | None] = mapped_column(Integer, nullable=True)
    driver_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("drivers.id"), nullable=True)
    previous_driver_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("drivers.id"), nullable=True)
    race_name: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    # Relaciones
    user: Mapped["User"] = relationship("User")
    driver: Mapped["Driver"] = relationship("Driver", foreign_keys=[driver_id])
    previous_driver: Mapped["Driver"] = relationship("Driver", foreign_keys=[previous_driver_id])
