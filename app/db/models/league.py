# app/db/models/league.py
from sqlalchemy import Integer, String, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from typing import List, TYPE_CHECKING
from datetime import datetime
from app.db.session import Base

if TYPE_CHECKING:
    from app.db.models.user import User
    from app.db.models.league_member import LeagueMember
    from app.db.models.prediction import Prediction

class League(Base):
    __tablename__ = "leagues"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    owner_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    season_year: Mapped[int] = mapped_column(Integer, nullable=False)
    join_code: Mapped[str] = mapped_column(String(8), unique=True, index=True, nullable=False)
    # Posiciones que todos los miembros deben predecir cada carrera, ej: [1, 10]
    required_positions: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=lambda: [10])
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    # Relaciones
    owner: Mapped["User"] = relationship("User")
    members: Mapped[List["LeagueMember"]] = relationship(
        "LeagueMember", back_populates="league", cascade="all, delete-orphan"
    )
    predictions: Mapped[List["Prediction"]] = relationship(
        "Prediction", back_populates="league", cascade="all, delete-orphan"
    )
