"""Stop-order optimization for multi-stop trips.

A nearest-neighbor pass builds an initial tour anchored at the first
input stop; an optional 2-opt pass then reverses segments while that
strictly shortens the tour.  Tours are open paths: there is no leg back
to the first stop.

Neither pass is exact.  Trips carry single digits to low tens of stops,
where the heuristic is good enough for routing guidance; the refined
pass is O(N^3) in the worst case, so :func:`optimize_stops` enforces
``FleetConfig.max_route_stops``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from fleetcommand.config import FleetConfig
from fleetcommand.exceptions import InvalidStopError, RouteOptimizationError, TooManyStopsError
from fleetcommand.geo import distance_km, eta_minutes, is_valid_point, real_number
from fleetcommand.models.route import OrderedStop, RoutePlan, Stop

_logger = logging.getLogger(__name__)


def tour_distance_km(stops: Sequence[Stop]) -> float:
    """Sum of great-circle distances between consecutive stops."""
    return sum(distance_km(stops[k].position, stops[k + 1].position) for k in range(len(stops) - 1))


def _number(stops: Sequence[Stop]) -> list[OrderedStop]:
    return [OrderedStop.from_stop(stop, sequence) for sequence, stop in enumerate(stops, start=1)]


def optimize_greedy(stops: Sequence[Stop]) -> list[OrderedStop]:
    """Order *stops* by repeatedly visiting the nearest unvisited one.

    The route is anchored at ``stops[0]``; other starting points are not
    tried.  Ties go to the stop that comes first in the input, so the
    result is fully deterministic.  Coordinates are trusted: a NaN
    position yields NaN distances and an arbitrary but stable order.
    """
    if len(stops) <= 1:
        return _number(stops)

    visited = [False] * len(stops)
    visited[0] = True
    order = [0]
    current = stops[0].position

    while len(order) < len(stops):
        # min() keeps the first of equal keys, so ties go to input order.
        nearest = min(
            (index for index in range(len(stops)) if not visited[index]),
            key=lambda index: distance_km(current, stops[index].position),
        )
        visited[nearest] = True
        order.append(nearest)
        current = stops[nearest].position

    return _number([stops[index] for index in order])


def _two_opt(tour: list[OrderedStop], max_passes: int | None) -> tuple[list[OrderedStop], int]:
    best = list(tour)
    best_dist = tour_distance_km(best)
    accepted = 0

    improved = True
    while improved and (max_passes is None or accepted < max_passes):
        improved = False
        for i in range(len(best) - 1):
            for j in range(i + 2, len(best)):
                candidate = best[: i + 1] + best[i + 1 : j + 1][::-1] + best[j + 1 :]
                candidate_dist = tour_distance_km(candidate)
                if candidate_dist < best_dist:
                    best = candidate
                    best_dist = candidate_dist
                    accepted += 1
                    improved = True
                    break
            if improved:
                break

    return best, accepted


def optimize_refined(stops: Sequence[Stop], *, max_passes: int | None = None) -> list[OrderedStop]:
    """Nearest-neighbor ordering followed by 2-opt local search.

    For every pair ``(i, j)`` with ``j >= i + 2`` the stops after ``i`` up
    to and including ``j`` are reversed; a reversal is kept only if it
    strictly shortens the tour, after which the scan restarts.  The
    result is never longer than :func:`optimize_greedy` on the same input.

    Parameters
    ----------
    max_passes : int or None
        Stop after this many accepted reversals.  ``None`` refines until
        no improving reversal remains.
    """
    greedy = optimize_greedy(stops)
    if len(greedy) <= 2:
        return greedy

    refined, accepted = _two_opt(greedy, max_passes)
    if accepted:
        _logger.debug("2-opt accepted %d reversal(s) over %d stops", accepted, len(refined))
    return [stop.model_copy(update={"sequence": sequence}) for sequence, stop in enumerate(refined, start=1)]


def _check_stops(stops: Sequence[Stop], config: FleetConfig) -> None:
    limit = config.max_route_stops
    if limit and len(stops) > limit:
        raise TooManyStopsError(
            f"{len(stops)} stops exceeds the limit of {limit}",
            count=len(stops),
            limit=limit,
        )
    if not config.validate_stops:
        return
    for index, stop in enumerate(stops):
        position = stop.position
        if not is_valid_point(position.latitude, position.longitude):
            raise InvalidStopError(
                f"Stop {index} ({stop.address!r}) has invalid coordinates "
                f"({position.latitude}, {position.longitude})",
                index=index,
            )


def optimize_stops(
    stops: Sequence[Stop],
    *,
    refine: bool | None = None,
    config: FleetConfig | None = None,
) -> list[OrderedStop]:
    """Order *stops* for a trip.

    Unlike the lower-level optimizers this checks its input first.

    Raises
    ------
    TooManyStopsError
        More stops than ``config.max_route_stops``.
    InvalidStopError
        A stop has an invalid coordinate and ``config.validate_stops`` is set.
    """
    config = config or FleetConfig()
    _check_stops(stops, config)

    if refine is None:
        refine = config.refine_routes
    if not refine:
        return optimize_greedy(stops)
    return optimize_refined(stops, max_passes=config.max_refine_passes or None)


def plan_route(
    stops: Sequence[Stop],
    *,
    refine: bool | None = None,
    config: FleetConfig | None = None,
    average_speed_kmh: float | None = None,
) -> RoutePlan:
    """Optimize *stops* and attach the tour length and a driving ETA.

    Raises
    ------
    RouteOptimizationError
        The average speed is not a positive, finite number, or
        :func:`optimize_stops` rejected the stops.
    """
    config = config or FleetConfig()
    if refine is None:
        refine = config.refine_routes
    speed = config.default_average_speed_kmh if average_speed_kmh is None else average_speed_kmh
    speed_value = real_number(speed)
    if speed_value is None or not 0 < speed_value < math.inf:
        raise RouteOptimizationError(f"Average speed must be a positive number of km/h, got {speed!r}")

    ordered = optimize_stops(stops, refine=refine, config=config)
    total = tour_distance_km(ordered)
    return RoutePlan(
        stops=tuple(ordered),
        total_distance_km=total,
        eta_minutes=eta_minutes(total, speed_value),
        refined=refine,
    )
