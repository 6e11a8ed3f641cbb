# app/db/models/league_member.py
from sqlalchemy import Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from datetime import datetime
from app.db.session import Base

class LeagueMember(Base):
    __tablename__ = "league_members"
    __table_args__ = (
        # Un usuario solo puede estar una vez en cada liga
        UniqueConstraint("league_id", "user_id", name="uq_league_user"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    league_id: Mapped[int] = mapped_column(Integer, ForeignKey("leagues.id"), nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    role: Mapped[str] = mapped_column(String, default="Member")  # Owner | Member
    joined_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    # Relaciones
    league: Mapped["League"] = relationship("League", back_populates="members")
    user: Mapped["User"] = relationship("User", back_populates="memberships")
