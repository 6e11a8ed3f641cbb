"""
Reglas de las predicciones que se validan antes de puntuar:
hora de cierre, posiciones obligatorias de la liga y coherencia
entre resultado y predicciones.
"""
import logging
from datetime import datetime, timedelta

from app.core.config import settings
from app.core.dates import to_naive_utc, utcnow
from app.core.exceptions import (
    DuplicateDriverPickError,
    InvalidLeagueConfigError,
    InvalidRaceResultError,
    PositionNotRequiredError,
    PredictionLockedError,
    ResultMismatchError,
    SprintNotAvailableError,
)

logger = logging.getLogger(__name__)

EVENT_TYPES = ("race", "sprint")
MIN_POSITION = 1
MAX_POSITION = 20
MAX_REQUIRED_POSITIONS = 2
MIN_WEEK = 1
MAX_WEEK = 24


def get_lock_time(race, event_type: str = "race", offset_minutes: int | None = None) -> datetime:
    """
    Hora de cierre = inicio de la clasificación menos el margen configurado.
    Para el sprint se usa la clasificación sprint si existe.
    """
    if offset_minutes is None:
        offset_minutes = settings.LOCK_OFFSET_MINUTES

    qualifying = race.qualifying_datetime
    if event_type == "sprint" and race.sprint_qualifying_datetime:
        qualifying = race.sprint_qualifying_datetime

    return to_naive_utc(qualifying) - timedelta(minutes=offset_minutes)


def is_locked(race, event_type: str = "race", now: datetime | None = None, offset_minutes: int | None = None) -> bool:
    now = to_naive_utc(now) if now else utcnow()
    return now >= get_lock_time(race, event_type, offset_minutes)


def ensure_not_locked(race, event_type: str = "race", now: datetime | None = None):
    if is_locked(race, event_type, now):
        logger.warning("Pick rechazado: semana %s (%s) bloqueada", race.week_number, event_type)
        raise PredictionLockedError(race.week_number, event_type)


def ensure_event_available(race, event_type: str):
    if event_type not in EVENT_TYPES:
        raise InvalidRaceResultError(f"Tipo de evento desconocido: {event_type}")
    if event_type == "sprint" and not race.has_sprint:
        raise SprintNotAvailableError(race.week_number)


def validate_required_positions(positions) -> list[int]:
    """Una liga exige 1 o 2 posiciones distintas entre P1 y P20."""
    positions = list(positions)
    cleaned = sorted(set(positions))

    if len(cleaned) != len(positions):
        raise InvalidLeagueConfigError("Posiciones repetidas")
    if not cleaned or len(cleaned) > MAX_REQUIRED_POSITIONS:
        raise InvalidLeagueConfigError(
            f"Una liga debe tener entre 1 y {MAX_REQUIRED_POSITIONS} posiciones obligatorias"
        )

    for p in cleaned:
        if not MIN_POSITION <= p <= MAX_POSITION:
            raise InvalidLeagueConfigError(f"Posición fuera de rango: P{p}")

    return cleaned


def validate_pick_positions(league, picks):
    """
    `picks` es una lista de objetos con .position y .driver_id.
    Todas las posiciones deben ser obligatorias en la liga y sin repetir piloto.
    """
    required = list(league.required_positions)
    seen_positions = set()
    seen_drivers = set()

    for pick in picks:
        if pick.position not in required or pick.position in seen_positions:
            raise PositionNotRequiredError(pick.position, required)
        if pick.driver_id in seen_drivers:
            raise DuplicateDriverPickError(pick.driver_id)
        seen_positions.add(pick.position)
        seen_drivers.add(pick.driver_id)


def validate_result_positions(entries):
    """
    `entries` es una lista de (position, driver_id).
    Posiciones 1..20, sin posiciones ni pilotos repetidos. Pueden faltar
    posiciones (DNF/DNS).
    """
    if not entries:
        raise InvalidRaceResultError("El resultado no tiene posiciones")

    positions = set()
    drivers = set()
    for position, driver_id in entries:
        if not MIN_POSITION <= position <= MAX_POSITION:
            raise InvalidRaceResultError(f"Posición fuera de rango: P{position}")
        if position in positions:
            raise InvalidRaceResultError(f"Posición P{position} repetida")
        if driver_id in drivers:
            raise InvalidRaceResultError(f"El piloto {driver_id} aparece dos veces")
        positions.add(position)
        drivers.add(driver_id)


def ensure_result_matches(predictions, race_result):
    """Todas las predicciones deben ser del mismo evento que el resultado."""
    expected = (race_result.week_number, race_result.event_type)
    for p in predictions:
        got = (p.week_number, p.event_type)
        if got != expected:
            raise ResultMismatchError(expected, got)
