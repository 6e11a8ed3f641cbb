from pydantic import BaseModel
from datetime import datetime

class ActivityOut(BaseModel):
    id: int
    league_id: int
    user_id: int | None = None
    user_name: str | None = None
    activity_type: str
    week_number: int | None = None
    event_type: str | None = None
    position: int | None = None
    driver_id: int | None = None
    driver_name: str | None = None
    driver_team: str | None = None
    previous_driver_id: int | None = None
    previous_driver_name: str | None = None
    previous_driver_team: str | None = None
    race_name: str | None = None
    created_at: datetime | None = None
