from __future__ import annotations

from fuel_stops.services.scoring import score_candidate
from fuel_stops.services.types import ProjectedCandidate, ScoredCandidate

BUCKET_MILES = 25.0


def select_distributed_stops(
    candidates: list[ProjectedCandidate],
    total_distance_miles: float,
    max_stops: int,
    bucket_miles: float = BUCKET_MILES,
) -> list[ProjectedCandidate]:
    """Pick at most ``max_stops`` candidates spread evenly along the route.

    At most one candidate per ``bucket_miles`` interval survives, and the
    result is ordered by position along the route.
    """
    if len(candidates) <= max_stops:
        return sorted(candidates, key=lambda candidate: candidate.miles_along_route)

    scored = [
        ScoredCandidate(projected=candidate, score=score_candidate(candidate))
        for candidate in candidates
    ]
    representatives = _bucket_representatives(scored, bucket_miles)

    target_count = min(max_stops, len(representatives))
    chosen: list[ScoredCandidate] = []
    unused = list(representatives)

    for slot in range(1, target_count + 1):
        if not unused:
            break
        target_miles = slot * total_distance_miles / (target_count + 1)
        best = min(
            unused,
            key=lambda value: (abs(value.miles_along_route - target_miles), -value.score),
        )
        chosen.append(best)
        unused.remove(best)

    if len(chosen) < max_stops and unused:
        by_score = sorted(unused, key=lambda value: value.score, reverse=True)
        chosen.extend(by_score[: max_stops - len(chosen)])

    ordered = sorted(chosen, key=lambda value: value.miles_along_route)
    return [value.projected for value in ordered[:max_stops]]


def _bucket_representatives(
    scored: list[ScoredCandidate], bucket_miles: float
) -> list[ScoredCandidate]:
    buckets: dict[int, ScoredCandidate] = {}
    for value in scored:
        bucket = int(value.miles_along_route // bucket_miles)
        current = buckets.get(bucket)
        # Ties keep the first candidate seen.
        if current is None or value.score > current.score:
            buckets[bucket] = value
    return [buckets[bucket] for bucket in sorted(buckets)]
