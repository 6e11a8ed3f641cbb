from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Literal

from app.core.dates import to_naive_utc

# Esquemas para Pilotos
class DriverCreate(BaseModel):
    name: str
    team: str
    driver_number: int = Field(ge=1, le=99)
    country: str | None = None

class DriverOut(DriverCreate):
    id: int
    is_active: bool = True

    class Config:
        from_attributes = True

# Esquemas para Carreras
class F1RaceCreate(BaseModel):
    season_year: int
    week_number: int = Field(ge=1, le=24)
    name: str
    circuit_name: str | None = None
    country: str | None = None
    qualifying_datetime: datetime
    race_datetime: datetime
    has_sprint: bool = False
    sprint_qualifying_datetime: datetime | None = None

    @field_validator("qualifying_datetime", "race_datetime", "sprint_qualifying_datetime")
    @classmethod
    def store_in_utc(cls, value):
        # Se guarda en UTC sin zona: "2025-03-16T06:00:00+02:00" -> 04:00
        return to_naive_utc(value)

class F1RaceOut(F1RaceCreate):
    id: int

    class Config:
        from_attributes = True

# Esquemas para Resultados
class ResultEntry(BaseModel):
    position: int = Field(ge=1, le=20)
    driver_id: int

class RaceResultIn(BaseModel):
    event_type: Literal["race", "sprint"] = "race"
    season_year: int | None = None
    results: list[ResultEntry] = Field(min_length=1)

class RaceResultOut(BaseModel):
    id: int
    season_year: int
    week_number: int
    event_type: str
    positions: dict[int, int]  # {posición: driver_id}
