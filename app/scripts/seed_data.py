import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.logging import setup_logging
from app.db.session import SessionLocal, engine, Base
from app.db.models import _all
from app.db.models.driver import Driver
from app.db.models.f1_race import F1Race

logger = logging.getLogger(__name__)

# (nombre, equipo, dorsal, país)
GRID = [
    ("Max Verstappen", "Red Bull Racing", 1, "Netherlands"),
    ("Yuki Tsunoda", "Red Bull Racing", 22, "Japan"),
    ("Lewis Hamilton", "Ferrari", 44, "United Kingdom"),
    ("Charles Leclerc", "Ferrari", 16, "Monaco"),
    ("Lando Norris", "McLaren", 4, "United Kingdom"),
    ("Oscar Piastri", "McLaren", 81, "Australia"),
    ("George Russell", "Mercedes", 63, "United Kingdom"),
    ("Kimi Antonelli", "Mercedes", 12, "Italy"),
    ("Fernando Alonso", "Aston Martin", 14, "Spain"),
    ("Lance Stroll", "Aston Martin", 18, "Canada"),
    ("Carlos Sainz", "Williams", 55, "Spain"),
    ("Alexander Albon", "Williams", 23, "Thailand"),
    ("Pierre Gasly", "Alpine", 10, "France"),
    ("Franco Colapinto", "Alpine", 43, "Argentina"),
    ("Liam Lawson", "Racing Bulls", 30, "New Zealand"),
    ("Isack Hadjar", "Racing Bulls", 6, "France"),
    ("Esteban Ocon", "Haas", 31, "France"),
    ("Oliver Bearman", "Haas", 87, "United Kingdom"),
    ("Nico Hulkenberg", "Sauber", 27, "Germany"),
    ("Gabriel Bortoleto", "Sauber", 5, "Brazil"),
]

# (semana, nombre, circuito, país, fecha de carrera, sprint)
CALENDAR = [
    (1, "Australian Grand Prix", "Albert Park", "Australia", datetime(2025, 3, 16, 4, 0), False),
    (2, "Chinese Grand Prix", "Shanghai International Circuit", "China", datetime(2025, 3, 23, 7, 0), True),
    (3, "Japanese Grand Prix", "Suzuka", "Japan", datetime(2025, 4, 6, 5, 0), False),
    (4, "Bahrain Grand Prix", "Bahrain International Circuit", "Bahrain", datetime(2025, 4, 13, 15, 0), False),
    (5, "Saudi Arabian Grand Prix", "Jeddah Corniche Circuit", "Saudi Arabia", datetime(2025, 4, 20, 17, 0), False),
    (6, "Miami Grand Prix", "Miami International Autodrome", "United States", datetime(2025, 5, 4, 20, 0), True),
]


def seed_drivers(db: Session) -> int:
    """Inserta la parrilla que falte (por dorsal). Devuelve cuántos pilotos se crearon."""
    existing = {d.driver_number for d in db.query(Driver).all()}
    created = 0
    for name, team, number, country in GRID:
        if number in existing:
            continue
        db.add(Driver(name=name, team=team, driver_number=number, country=country))
        created += 1
    db.commit()
    logger.info("🏎️ %s pilotos creados", created)
    return created


def seed_calendar(db: Session, season_year: int | None = None) -> int:
    """Calendario de ejemplo: clasificación el sábado, sprint quali el viernes."""
    season_year = season_year or settings.CURRENT_SEASON_YEAR
    existing = {
        r.week_number
        for r in db.query(F1Race).filter(F1Race.season_year == season_year).all()
    }
    created = 0
    for week, name, circuit, country, race_dt, has_sprint in CALENDAR:
        if week in existing:
            continue
        race_dt = race_dt.replace(year=season_year)
        db.add(F1Race(
            season_year=season_year,
            week_number=week,
            name=name,
            circuit_name=circuit,
            country=country,
            qualifying_datetime=race_dt - timedelta(days=1),
            race_datetime=race_dt,
            has_sprint=has_sprint,
            sprint_qualifying_datetime=race_dt - timedelta(days=2) if has_sprint else None,
        ))
        created += 1
    db.commit()
    logger.info("📅 %s carreras creadas para %s", created, season_year)
    return created


def main():
    setup_logging()
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        seed_drivers(db)
        seed_calendar(db)
    finally:
        db.close()
    print("✅ Datos de ejemplo cargados")


if __name__ == "__main__":
    main()
