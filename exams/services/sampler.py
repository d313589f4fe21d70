import logging
import random

from django.db.models import prefetch_related_objects

from common.enums import MIXED_CATEGORIES
from exams.models import Question

logger = logging.getLogger(__name__)


def filtered_pool(categories=None, difficulty=None):
    qs = Question.objects.filter(is_active=True)
    cats = [c for c in (categories or []) if c != MIXED_CATEGORIES]
    if cats:
        qs = qs.filter(category__in=cats)
    if difficulty:
        qs = qs.filter(difficulty=difficulty)
    return qs


class QuestionSampler:
    """
    Draws up to ``count`` distinct active questions matching the filters.

    Only the matching count plus one single-row read per drawn offset hit the
    database, so the question table is never loaded whole. A short result
    (pool smaller than ``count``) is returned as-is; the caller decides
    whether that is an error.
    """

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def _distinct_offsets(self, total: int, count: int) -> list[int]:
        # rejection sampling; fine while count is much smaller than total
        seen, offsets = set(), []
        while len(offsets) < count:
            offset = self.rng.randrange(total)
            if offset not in seen:
                seen.add(offset)
                offsets.append(offset)
        return offsets

    def sample(self, count: int, categories=None, difficulty=None) -> list[Question]:
        qs = filtered_pool(categories, difficulty).order_by("id")
        total = qs.count()
        if total == 0 or count <= 0:
            return []

        if total <= count:
            picked = list(qs)
        else:
            picked = [qs[offset] for offset in self._distinct_offsets(total, count)]

        prefetch_related_objects(picked, "options")
        logger.debug("Sampled %s/%s questions (pool=%s)", len(picked), count, total)
        return picked
