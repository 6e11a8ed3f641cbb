from pydantic import BaseModel, Field
from typing import Literal

EventType = Literal["race", "sprint"]

# Esquemas para Picks
class PickIn(BaseModel):
    position: int = Field(ge=1, le=20)
    driver_id: int

class PicksSubmit(BaseModel):
    event_type: EventType = "race"
    picks: list[PickIn] = Field(min_length=1)

class PickOut(BaseModel):
    id: int
    league_id: int
    user_id: int
    week_number: int
    event_type: str
    position: int
    driver_id: int
    driver_name: str | None = None
    driver_team: str | None = None
    is_locked: bool = False
    is_scored: bool = False
    points: int = 0
    position_difference: int | None = None

# Esquemas para resultados de una semana en una liga
class ScoredPick(BaseModel):
    position: int
    driver_id: int | None = None
    driver_name: str | None = None
    actual_driver_id: int | None = None
    actual_driver_name: str | None = None
    actual_finish_position: int | None = None
    position_difference: int | None = None
    is_correct: bool = False
    points: int = 0

class MemberWeekResult(BaseModel):
    user_id: int
    user_name: str
    picks: list[ScoredPick]
    total_points: int
    total_correct: int
    has_made_all_picks: bool
