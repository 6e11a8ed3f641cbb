"""
Excepciones de dominio.

Son violaciones del contrato de entrada que se detectan ANTES de llamar al
motor de puntuación. main.py las convierte en respuestas {"detail": ...}.
"""


class FinalPointError(Exception):
    """Base para todos los errores de reglas del juego."""

    status_code = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class PositionNotRequiredError(FinalPointError):
    """La posición no está entre las posiciones obligatorias de la liga."""

    def __init__(self, position: int, required_positions: list[int]):
        self.position = position
        self.required_positions = required_positions
        super().__init__(
            f"La posición P{position} no es obligatoria en esta liga "
            f"(posiciones: {', '.join(f'P{p}' for p in required_positions)})"
        )


class DuplicateDriverPickError(FinalPointError):
    """El mismo piloto elegido para dos posiciones del mismo evento."""

    def __init__(self, driver_id: int):
        self.driver_id = driver_id
        super().__init__(f"El piloto {driver_id} ya está elegido para otra posición")


class InvalidLeagueConfigError(FinalPointError):
    pass


class PredictionLockedError(FinalPointError):
    """Las predicciones se cierran antes de la clasificación."""

    status_code = 423

    def __init__(self, week_number: int, event_type: str):
        self.week_number = week_number
        self.event_type = event_type
        super().__init__(f"Predicciones bloqueadas para la semana {week_number} ({event_type})")


class SprintNotAvailableError(FinalPointError):
    def __init__(self, week_number: int):
        self.week_number = week_number
        super().__init__(f"La semana {week_number} no tiene carrera sprint")


class InvalidRaceResultError(FinalPointError):
    pass


class ResultMismatchError(FinalPointError):
    """Una predicción se intenta puntuar contra el resultado de otro evento."""

    status_code = 409

    def __init__(self, expected: tuple, got: tuple):
        self.expected = expected
        self.got = got
        super().__init__(
            f"Resultado de la semana {expected[0]} ({expected[1]}) "
            f"no corresponde a la predicción de la semana {got[0]} ({got[1]})"
        )


class RaceResultNotFoundError(FinalPointError):
    status_code = 404

    def __init__(self, week_number: int, event_type: str):
        self.week_number = week_number
        self.event_type = event_type
        super().__init__(f"Resultado no introducido para la semana {week_number} ({event_type})")
