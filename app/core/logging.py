import logging

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str | None = None):
    """Configura el logger raíz una sola vez al arrancar la API."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )
    # SQLAlchemy es muy ruidoso en DEBUG
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
