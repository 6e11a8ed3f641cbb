"""
Motor de puntuación.

Funciones puras: reciben predicciones y resultados ya cargados (modelos ORM o
cualquier objeto con los mismos atributos) y devuelven valores nuevos. No
tocan la base de datos.
"""
from dataclasses import dataclass
from typing import Hashable, Iterable, Mapping, Optional

# Puntos según la diferencia entre la posición predicha y la real
POINTS_BY_DIFFERENCE = {
    0: 10,
    1: 7,
    2: 5,
    3: 3,
    4: 2,
    5: 1,
}

PERFECT_PICK_POINTS = POINTS_BY_DIFFERENCE[0]


@dataclass(frozen=True)
class PositionScore:
    position_difference: Optional[int]  # None = piloto fuera del resultado (DNF/DNS)
    points: int


@dataclass(frozen=True)
class ScoreRecord:
    """Una predicción ya puntuada, la unidad de entrada de la clasificación."""
    user_id: int
    race_id: Hashable  # ej: (week_number, event_type)
    points: int
    position_difference: Optional[int]


@dataclass
class LeagueStanding:
    user_id: int
    total_points: int = 0
    perfect_picks: int = 0
    seven_point_picks: int = 0
    total_picks: int = 0
    races_participated: int = 0
    average_points: float = 0.0
    average_distance: Optional[float] = None
    rank: int = 0

    @property
    def correct_picks(self):
        return self.perfect_picks


def points_for_difference(position_difference):
    if position_difference is None:
        return 0
    return POINTS_BY_DIFFERENCE.get(position_difference, 0)


def build_real_positions_map(race_positions):
    """
    Devuelve: {driver_id: position}
    """
    return {
        rp.driver_id: rp.position
        for rp in race_positions
    }


def _result_positions(race_result):
    # Acepta un RaceResult (con .positions) o directamente la lista de posiciones
    return getattr(race_result, "positions", race_result)


def _score_against_map(prediction, real_map: Mapping[int, int]) -> PositionScore:
    actual_position = real_map.get(prediction.driver_id)
    if actual_position is None:
        return PositionScore(position_difference=None, points=0)

    diff = abs(actual_position - prediction.position)
    return PositionScore(position_difference=diff, points=points_for_difference(diff))


def score_position(prediction, race_result) -> PositionScore:
    """Puntúa una predicción (posición + piloto) contra el resultado oficial."""
    real_map = build_real_positions_map(_result_positions(race_result))
    return _score_against_map(prediction, real_map)


def score_prediction(predictions: Iterable, race_result) -> int:
    """
    Suma los puntos de todas las posiciones de un usuario para una carrera.
    Cada posición se puntúa por separado.
    """
    real_map = build_real_positions_map(_result_positions(race_result))
    return sum(_score_against_map(p, real_map).points for p in predictions)


def _standing_sort_key(standing: LeagueStanding, names: Mapping[int, str]):
    return (
        -standing.total_points,
        -standing.perfect_picks,
        -standing.seven_point_picks,
        -standing.average_points,
        # Sin carreras puntuadas: al final de los empatados a cero
        standing.races_participated == 0,
        names.get(standing.user_id, "").lower(),
        standing.user_id,
    )


def compute_standings(
    all_scores: Iterable[ScoreRecord],
    member_ids: Iterable[int] = (),
    names: Optional[Mapping[int, str]] = None,
) -> list[LeagueStanding]:
    """
    Clasificación de una liga a partir de todas las predicciones puntuadas.

    Desempates: más aciertos exactos, más picks de 7 puntos, mejor media por
    carrera, haber jugado alguna carrera y, por último, nombre (si se pasa) y
    user_id ascendente.

    `member_ids` permite incluir miembros sin ninguna carrera puntuada; salen
    con 0 puntos y media 0.
    """
    names = names or {}
    standings: dict[int, LeagueStanding] = {
        user_id: LeagueStanding(user_id=user_id) for user_id in member_ids
    }
    races: dict[int, set] = {}
    distances: dict[int, list[int]] = {}

    for score in all_scores:
        standing = standings.setdefault(score.user_id, LeagueStanding(user_id=score.user_id))
        standing.total_points += score.points
        standing.total_picks += 1

        if score.position_difference == 0:
            standing.perfect_picks += 1
        elif score.position_difference == 1:
            standing.seven_point_picks += 1

        if score.position_difference is not None:
            distances.setdefault(score.user_id, []).append(score.position_difference)

        races.setdefault(score.user_id, set()).add(score.race_id)

    for user_id, standing in standings.items():
        standing.races_participated = len(races.get(user_id, ()))
        if standing.races_participated:
            standing.average_points = standing.total_points / standing.races_participated

        user_distances = distances.get(user_id)
        if user_distances:
            standing.average_distance = sum(user_distances) / len(user_distances)

    ordered = sorted(standings.values(), key=lambda s: _standing_sort_key(s, names))
    for rank, standing in enumerate(ordered, start=1):
        standing.rank = rank

    return ordered
