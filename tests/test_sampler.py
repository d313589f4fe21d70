"""Random draws from the active question pool."""
import random

import pytest

from common.enums import Difficulty, QuestionCategory
from exams.services.sampler import QuestionSampler, filtered_pool

pytestmark = pytest.mark.django_db


def test_sample_returns_distinct_questions(question_bank):
    picked = QuestionSampler(random.Random(7)).sample(30)
    ids = [q.id for q in picked]
    assert len(ids) == 30
    assert len(set(ids)) == 30


def test_sample_respects_category_filter(question_bank):
    cats = [QuestionCategory.NUMERICAL_ABILITY, QuestionCategory.CLERICAL_ABILITY]
    picked = QuestionSampler().sample(15, categories=cats)
    assert len(picked) == 15
    assert {q.category for q in picked} <= set(cats)


def test_mixed_means_no_category_filter(question_bank):
    assert filtered_pool(["MIXED"]).count() == len(question_bank)


def test_sample_respects_difficulty_and_skips_inactive(make_question):
    for _ in range(3):
        make_question(difficulty=Difficulty.HARD)
    make_question(difficulty=Difficulty.HARD, is_active=False)
    make_question(difficulty=Difficulty.EASY)

    picked = QuestionSampler().sample(10, difficulty=Difficulty.HARD)
    assert len(picked) == 3
    assert all(q.difficulty == Difficulty.HARD and q.is_active for q in picked)


def test_short_pool_is_returned_whole(make_question):
    made = {make_question().id for _ in range(4)}
    picked = QuestionSampler().sample(10)
    assert {q.id for q in picked} == made


def test_empty_pool_returns_nothing(db):
    assert QuestionSampler().sample(5) == []


def test_seeded_sampler_is_reproducible(question_bank):
    first = [q.id for q in QuestionSampler(random.Random(42)).sample(10)]
    second = [q.id for q in QuestionSampler(random.Random(42)).sample(10)]
    assert first == second


def test_sampled_questions_carry_their_options(question_bank, django_assert_num_queries):
    picked = QuestionSampler(random.Random(1)).sample(5)
    with django_assert_num_queries(0):
        assert all(len(q.options.all()) == 4 for q in picked)
