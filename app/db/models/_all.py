# Importa todos los modelos para que SQLAlchemy los registre antes de create_all
from app.db.models.user import User
from app.db.models.league import League
from app.db.models.league_member import LeagueMember
from app.db.models.driver import Driver
from app.db.models.f1_race import F1Race
from app.db.models.prediction import Prediction
from app.db.models.race_result import RaceResult
from app.db.models.race_position import RacePosition
from app.db.models.league_activity import LeagueActivity
