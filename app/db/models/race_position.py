# app/db/models/race_position.py
from sqlalchemy import Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.session import Base

class RacePosition(Base):
    __tablename__ = "race_positions"
    __table_args__ = (
        UniqueConstraint("race_result_id", "position", name="uq_result_position"),
        # Un piloto solo puede terminar en una posición
        UniqueConstraint("race_result_id", "driver_id", name="uq_result_driver"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    race_result_id: Mapped[int] = mapped_column(Integer, ForeignKey("race_results.id"), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    driver_id: Mapped[int] = mapped_column(Integer, ForeignKey("drivers.id"), nullable=False)

    # Relaciones
    race_result: Mapped["RaceResult"] = relationship("RaceResult", back_populates="positions")
    driver: Mapped["Driver"] = relationship("Driver")
