from pydantic import BaseModel

class StandingOut(BaseModel):
    rank: int
    user_id: int
    user_name: str
    total_points: int

class DetailedStandingOut(StandingOut):
    total_picks: int
    correct_picks: int
    perfect_picks: int
    seven_point_picks: int
    races_participated: int
    average_points: float
    average_distance: float | None = None
