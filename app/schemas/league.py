from pydantic import BaseModel, Field
from datetime import datetime

class LeagueCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    # Por defecto solo P10 (modo clásico)
    positions: list[int] = [10]
    season_year: int | None = None

class LeagueUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=100)

class LeaguePositionsUpdate(BaseModel):
    positions: list[int]

class JoinByCode(BaseModel):
    join_code: str

class LeagueOut(BaseModel):
    id: int
    name: str
    owner_id: int
    season_year: int
    join_code: str
    required_positions: list[int]
    member_count: int = 0
    user_role: str | None = None
    created_at: datetime | None = None

class LeagueMemberOut(BaseModel):
    user_id: int
    name: str
    role: str
    joined_at: datetime | None = None
