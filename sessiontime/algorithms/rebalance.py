import logging
import math
import time
from typing import Callable, List, Optional, Sequence, Tuple

from ..models import PenaltyWeights, RebalanceResult, Slot
from ..scheduling.evaluation import calculate_metrics
from ..scheduling.validation import constraints_ok
from .analytics import AnalyticsSource, weights_from_source
from .rng import SeededRandom, wall_clock_seed

logger = logging.getLogger(__name__)

DEFAULT_ITERATIONS = 1000
TEMPERATURE_EPSILON = 0.001

# (attribute, slot position, list position, slot position, list position)
Swap = Tuple[str, int, int, int, int]


class RebalanceParams:
    def __init__(self, seed=None, iterations=DEFAULT_ITERATIONS, weights=None, time_limit=None):
        self.seed = seed
        self.iterations = iterations
        self.weights = weights
        self.time_limit = time_limit


def propose_swap(slots: Sequence[Slot], rng: SeededRandom,
                 with_teams: List[int], with_juries: List[int]) -> Optional[Swap]:
    """Pick a team swap or a jury swap between two different slots.

    Returns None when the move cannot be made this iteration.
    """
    if rng.next() < 0.5:
        attr, eligible = 'team_ids', with_teams
    else:
        attr, eligible = 'jury_ids', with_juries
    if len(eligible) < 2:
        return None
    a = rng.next_int(len(eligible))
    b = rng.next_int(len(eligible))
    if a == b:
        return None
    sa, sb = eligible[a], eligible[b]
    pa = rng.next_int(len(getattr(slots[sa], attr)))
    pb = rng.next_int(len(getattr(slots[sb], attr)))
    return attr, sa, pa, sb, pb

def apply_swap(slots: Sequence[Slot], swap: Swap) -> None:
    # swapping twice restores the original lists
    attr, sa, pa, sb, pb = swap
    la, lb = getattr(slots[sa], attr), getattr(slots[sb], attr)
    la[pa], lb[pb] = lb[pb], la[pa]

def accept_probability(best_penalty: float, candidate_penalty: float, temperature: float) -> float:
    if temperature <= 0:
        return 0.0
    return math.exp((best_penalty - candidate_penalty) / (temperature * best_penalty + TEMPERATURE_EPSILON))

def rebalance(slots: Sequence[Slot], team_ids: Sequence[int], jury_ids: Sequence[int],
              params: Optional[RebalanceParams] = None,
              should_stop: Optional[Callable[[], bool]] = None) -> RebalanceResult:
    """Improve a schedule by random team/jury swaps under a cooling acceptance rule.

    Candidates that put a jury in two overlapping slots, or that use a team or
    jury outside the selected scope, are reverted. The input slots are not
    modified; the caller keeps them for undo.
    """
    if params is None:
        params = RebalanceParams()
    seed = params.seed if params.seed is not None else wall_clock_seed()
    weights = params.weights or PenaltyWeights()
    iterations = params.iterations
    team_ids = list(team_ids)
    team_scope, jury_scope = set(team_ids), set(jury_ids)

    original = [s.copy() for s in slots]
    before = calculate_metrics(original, team_ids, weights)

    current = [s.copy() for s in slots]
    best_penalty = before.total_penalty
    # swaps never change list lengths, so eligibility is fixed for the run
    with_teams = [i for i, s in enumerate(current) if s.team_ids]
    with_juries = [i for i, s in enumerate(current) if s.jury_ids]

    rng = SeededRandom(seed)
    start = time.perf_counter()
    accepted = rejected = invalid = 0
    it = 0
    for it in range(iterations):
        if should_stop is not None and should_stop():
            logger.info("Rebalance cancelled after %d iterations", it)
            break
        if params.time_limit and (time.perf_counter() - start) >= params.time_limit:
            logger.info("Rebalance time limit reached after %d iterations", it)
            break
        swap = propose_swap(current, rng, with_teams, with_juries)
        if swap is None:
            continue
        apply_swap(current, swap)
        if not constraints_ok(current, team_scope, jury_scope):
            apply_swap(current, swap)
            invalid += 1
            continue
        candidate_penalty = calculate_metrics(current, team_ids, weights).total_penalty
        temperature = 1.0 - it / iterations
        if (candidate_penalty < best_penalty
                or rng.next() < accept_probability(best_penalty, candidate_penalty, temperature)):
            best_penalty = candidate_penalty
            accepted += 1
        else:
            apply_swap(current, swap)
            rejected += 1
        if it % 100 == 0:
            logger.debug("iteration %d: penalty %.3f (accepted %d, rejected %d, invalid %d)",
                         it, best_penalty, accepted, rejected, invalid)
    else:
        it = iterations

    after = calculate_metrics(current, team_ids, weights)
    improvement = 0.0
    if before.total_penalty > 0:
        improvement = (before.total_penalty - after.total_penalty) / before.total_penalty * 100
    logger.info("Rebalance seed=%d: penalty %.3f -> %.3f (%.1f%%), %d accepted, %d invalid",
                seed, before.total_penalty, after.total_penalty, improvement, accepted, invalid)
    return RebalanceResult(
        original_slots=original,
        slots=current,
        before_metrics=before,
        after_metrics=after,
        improvement_percentage=improvement,
        seed=seed,
        iterations_run=it,
        accepted_moves=accepted,
    )

def rebalance_with_analytics(slots: Sequence[Slot], team_ids: Sequence[int], jury_ids: Sequence[int],
                             source: AnalyticsSource, params: Optional[RebalanceParams] = None,
                             should_stop: Optional[Callable[[], bool]] = None) -> RebalanceResult:
    """Rebalance with weights informed by analytics across all saved sessions."""
    if params is None:
        params = RebalanceParams()
    weights = weights_from_source(source, params.weights)
    tuned = RebalanceParams(seed=params.seed, iterations=params.iterations,
                            weights=weights, time_limit=params.time_limit)
    return rebalance(slots, team_ids, jury_ids, tuned, should_stop)
