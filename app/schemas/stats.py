from pydantic import BaseModel

class UserStatsOut(BaseModel):
    total_picks: int
    correct_picks: int
    total_points: int
    average_points: float
    accuracy: float
    average_distance: float | None = None

class GlobalStatsOut(BaseModel):
    total_users: int
    total_leagues: int
    total_picks: int
    correct_picks: int
    accuracy: float
    average_points: float
    average_distance_from_target: float | None = None

class MonthlyStatsOut(BaseModel):
    month: str  # "2025-03"
    total_picks: int
    correct_picks: int
    total_points: int
    accuracy: float

class LeagueStatsOut(BaseModel):
    league_id: int
    member_count: int
    races_scored: int
    total_picks: int
    correct_picks: int
    overall_accuracy: float
    average_points: float
    average_distance: float | None = None

class DriverPositionStatsOut(BaseModel):
    driver_id: int
    driver_name: str
    driver_team: str
    times_in_position: int
    total_races: int
    percentage_in_position: float
