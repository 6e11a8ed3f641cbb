"""
Las horas de las carreras se guardan en UTC sin zona horaria (columnas
DateTime normales). Todo lo que entra o se compara pasa por aquí.
"""
from datetime import datetime, timezone


def to_naive_utc(value: datetime | None) -> datetime | None:
    """Convierte a UTC y quita la zona. Las horas sin zona se asumen ya en UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)
