"""
Final grade aggregation for internship placements.

The final grade of a placement is derived from its scores and written back
onto the placement after every score change. Two strategies exist:

``mean``
    Arithmetic mean of the raw score values, ignoring item weights. This is
    what the school has been using and is the default.
``weighted``
    Sum of value x weight divided by the sum of weights of the scored items.

Results are rounded half up to two decimals. A placement without scores
has no final grade (``None``), never zero.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from django.conf import settings
from django.db import DatabaseError, transaction

from .exceptions import AggregationError
from .models import Placement, Score

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal('0.01')

STRATEGY_MEAN = 'mean'
STRATEGY_WEIGHTED = 'weighted'


@dataclass(frozen=True)
class Ok:
    value: Optional[Decimal]
    ok = True

    def as_dict(self):
        return {'ok': True, 'value': self.value, 'error': None}


@dataclass(frozen=True)
class Err:
    reason: str
    ok = False

    def as_dict(self):
        return {'ok': False, 'value': None, 'error': self.reason}


AggregationResult = Union[Ok, Err]


def round_half_up(value) -> Decimal:
    return Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def mean_grade(values) -> Optional[Decimal]:
    """Unweighted mean of ``values``; None for an empty sequence."""
    values = [Decimal(str(v)) for v in values]
    if not values:
        return None
    return round_half_up(sum(values) / len(values))


def weighted_grade(pairs) -> Optional[Decimal]:
    """Weighted mean of ``(value, weight)`` pairs; None for an empty sequence."""
    pairs = [(Decimal(str(v)), Decimal(str(w))) for v, w in pairs]
    if not pairs:
        return None
    total_weight = sum(w for _, w in pairs)
    if total_weight <= 0:
        raise AggregationError("Total bobot item penilaian adalah 0")
    return round_half_up(sum(v * w for v, w in pairs) / total_weight)


def get_strategy(name=None):
    name = name or getattr(settings, 'PRAKERIN_GRADE_STRATEGY', STRATEGY_MEAN)
    if name not in (STRATEGY_MEAN, STRATEGY_WEIGHTED):
        raise AggregationError(f"Unknown grade strategy: {name}")
    return name


def compute_final_grade(placement_id, strategy=None) -> Optional[Decimal]:
    """Final grade from the stored scores, without persisting it."""
    strategy = get_strategy(strategy)
    rows = list(Score.objects.filter(placement_id=placement_id).values_list('value', 'item__weight'))
    if strategy == STRATEGY_WEIGHTED:
        return weighted_grade(rows)
    return mean_grade(value for value, _ in rows)


def recompute_final_grade(placement_id, strategy=None) -> AggregationResult:
    """
    Recompute and persist the final grade of a placement.

    Last write wins. Failures are logged and returned as ``Err`` so the
    caller decides whether to warn; they never undo the score write that
    triggered the recomputation.
    """
    try:
        value = compute_final_grade(placement_id, strategy)
        updated = Placement.objects.filter(pk=placement_id).update(final_grade=value)
        if not updated:
            raise AggregationError(f"Placement {placement_id} does not exist")
    except (AggregationError, DatabaseError) as exc:
        logger.error("Final grade recomputation failed for placement %s: %s", placement_id, exc)
        return Err(str(exc))
    return Ok(value)


def record_score(placement, item, value, remark='', graded_by=None, strategy=None):
    """
    Create or replace the score of ``placement`` for ``item`` and refresh
    the placement's final grade.

    Returns ``(score, created, result)`` where ``result`` is the
    aggregation outcome.
    """
    with transaction.atomic():
        score, created = Score.objects.update_or_create(
            placement=placement,
            item=item,
            defaults={'value': value, 'remark': remark or '', 'graded_by': graded_by},
        )
    result = recompute_final_grade(placement.pk, strategy)
    return score, created, result


def delete_score(score, strategy=None) -> AggregationResult:
    """Delete a score and refresh the final grade of its placement."""
    placement_id = score.placement_id
    score.delete()
    return recompute_final_grade(placement_id, strategy)
