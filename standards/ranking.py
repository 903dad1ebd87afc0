from typing import List, Sequence, Tuple

from core.models import CableAlternative
from standards.optimizer import RunCandidate, to_currency

DEFAULT_MAX_ALTERNATIVES = 5


class CostRanker:
    @staticmethod
    def rank(candidates: Sequence[RunCandidate], max_alternatives: int = DEFAULT_MAX_ALTERNATIVES) -> List[RunCandidate]:
        """Unique (size, runs) candidates, cheapest first, capped for display."""
        unique = {}
        for candidate in candidates:
            key = (candidate.spec.size, candidate.cables_in_parallel)
            if key not in unique or candidate.sort_key < unique[key].sort_key:
                unique[key] = candidate
        ordered = sorted(unique.values(), key=lambda c: c.sort_key)
        return ordered[:max_alternatives]

    @staticmethod
    def to_alternatives(ranked: Sequence[RunCandidate]) -> Tuple[CableAlternative, ...]:
        return tuple(c.to_alternative(is_recommended=(i == 0)) for i, c in enumerate(ranked))

    @staticmethod
    def cost_savings(ranked: Sequence[RunCandidate]) -> float:
        if len(ranked) < 2:
            return 0.0
        return to_currency(ranked[1].total_cost - ranked[0].total_cost)
