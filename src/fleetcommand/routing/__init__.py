"""Trip stop-order optimization."""

from fleetcommand.routing.optimizer import (
    optimize_greedy,
    optimize_refined,
    optimize_stops,
    plan_route,
    tour_distance_km,
)

__all__ = [
    "optimize_greedy",
    "optimize_refined",
    "optimize_stops",
    "plan_route",
    "tour_distance_km",
]
