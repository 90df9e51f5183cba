from __future__ import annotations

import math

from fuel_stops.services.types import ProjectedCandidate

MAX_RATING = 5.0
RATING_WEIGHT = 4.0
REVIEW_WEIGHT = 6.0
MAX_REVIEW_POINTS = 20.0
PARKING_BONUS = 8.0
DEVIATION_WEIGHT = 1.5
MAX_DEVIATION_PENALTY = 20.0


def score_candidate(projected: ProjectedCandidate) -> float:
    """Quality minus route-deviation; every term is capped on its own."""
    candidate = projected.candidate
    rating_points = min(MAX_RATING, candidate.rating) * RATING_WEIGHT
    review_points = min(MAX_REVIEW_POINTS, math.log10(candidate.review_count + 1) * REVIEW_WEIGHT)
    parking_points = PARKING_BONUS if candidate.has_parking else 0.0
    deviation_penalty = min(
        MAX_DEVIATION_PENALTY, projected.distance_from_route_miles * DEVIATION_WEIGHT
    )
    return rating_points + review_points + parking_points - deviation_penalty
