# exams/management/commands/import_questions_xlsx.py
import logging
import re

import pandas as pd
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from common.enums import Difficulty, QuestionCategory
from exams.models import Question, QuestionOption

logger = logging.getLogger(__name__)

QUESTION_RE   = re.compile(r"^\s*question\b\s*[:\-]?\s*(.*)$", re.IGNORECASE)
OPTION_RE     = re.compile(r"^\s*\(?([A-Ea-e])\)?[.)]?\s+(.*)$")
ANSWER_RE     = re.compile(r"^\s*answer\b\s*[:\-]?\s*\(?([A-Ea-e])\)?", re.IGNORECASE)
EXPL_RE       = re.compile(r"^\s*explanation\b\s*[:\-]?\s*(.*)$", re.IGNORECASE)
CATEGORY_RE   = re.compile(r"^\s*category\b\s*[:\-]?\s*(.*)$", re.IGNORECASE)
DIFFICULTY_RE = re.compile(r"^\s*difficulty\b\s*[:\-]?\s*(.*)$", re.IGNORECASE)

LETTERS = "ABCDE"


def _clean(s):
    if s is None:
        return ""
    s = str(s).strip()
    # strip stray "Q1." / "1)" numbers at start
    return re.sub(r"^\s*(?:Q?\d+[.)-]\s*)", "", s, flags=re.IGNORECASE)


def _enum_value(raw: str, enum) -> str | None:
    key = re.sub(r"[\s-]+", "_", (raw or "").strip()).upper()
    return key if key in enum.values else None


def parse_lines(lines):
    """
    Parse one-column sheet rows into question blocks::

        Category: Numerical Ability      (optional, sticky until changed)
        Difficulty: Hard                 (optional, sticky until changed)
        Question: What is 2 + 2?
        A) 3
        B) 4
        Answer: B
        Explanation: ...                 (optional)

    Returns a list of dicts ``{text, options: [(letter, text)], correct,
    explanation, category, difficulty}``; blocks without options or an
    answer are skipped.
    """
    out = []
    category = difficulty = None
    i, n = 0, len(lines)

    while i < n:
        row = _clean(lines[i])
        i += 1
        if m := CATEGORY_RE.match(row):
            category = _enum_value(m.group(1), QuestionCategory)
            continue
        if m := DIFFICULTY_RE.match(row):
            difficulty = _enum_value(m.group(1), Difficulty)
            continue
        m_q = QUESTION_RE.match(row)
        if not m_q:
            continue

        q_text = m_q.group(1).strip() or row
        options, explanation, correct = [], "", None

        while i < n:
            curr = _clean(lines[i])
            if not curr:
                i += 1
                continue
            if QUESTION_RE.match(curr) or CATEGORY_RE.match(curr) or DIFFICULTY_RE.match(curr):
                break

            m_ans = ANSWER_RE.match(curr)
            if m_ans:
                correct = m_ans.group(1).upper()
                i += 1
                if i < n and (m_ex := EXPL_RE.match(_clean(lines[i]))):
                    explanation = m_ex.group(1).strip()
                    i += 1
                break

            m_opt = OPTION_RE.match(curr)
            if m_opt:
                options.append((m_opt.group(1).upper(), m_opt.group(2).strip()))
            else:
                q_text = (q_text + " " + curr).strip()
            i += 1

        if not options or correct not in {letter for letter, _ in options}:
            logger.warning("Skipping malformed question block: %s", q_text[:60])
            continue

        out.append({
            "text": q_text,
            "options": options,
            "correct": correct,
            "explanation": explanation,
            "category": category,
            "difficulty": difficulty,
        })

    return out


class Command(BaseCommand):
    help = "Import single-answer questions from an Excel sheet laid out as Category/Question/Options/Answer rows."

    def add_arguments(self, parser):
        parser.add_argument("--file", required=True, help="Path to .xlsx file")
        parser.add_argument("--sheet", default="Sheet1", help="Worksheet name (default: Sheet1)")
        parser.add_argument("--category", choices=QuestionCategory.values,
                            help="Category for blocks without a Category: row")
        parser.add_argument("--difficulty", choices=Difficulty.values, default=Difficulty.MEDIUM,
                            help="Difficulty for blocks without a Difficulty: row")
        parser.add_argument("--reset", action="store_true", help="Delete ALL existing questions before import")
        parser.add_argument("--dry-run", action="store_true", help="Parse only, do not write to DB")

    def handle(self, *args, **opts):
        path = opts["file"]
        self.stdout.write(f"Reading {path} [{opts['sheet']}]")

        try:
            # header=None so the first row is not swallowed as a header
            df = pd.read_excel(path, sheet_name=opts["sheet"], header=None, engine="openpyxl")
        except (OSError, ValueError) as e:
            raise CommandError(f"Failed to read Excel: {e}")

        lines = [str(x) for x in df.iloc[:, 0].dropna().tolist() if str(x).strip()]
        blocks = parse_lines(lines)
        self.stdout.write(f"Parsed {len(blocks)} question(s).")

        missing = [b["text"][:40] for b in blocks if not (b["category"] or opts["category"])]
        if missing:
            raise CommandError(f"{len(missing)} question(s) have no category; pass --category. First: {missing[0]!r}")

        if opts["dry_run"]:
            self.stdout.write("Dry-run complete. No DB changes made.")
            return

        with transaction.atomic():
            if opts["reset"]:
                self.stdout.write("Purging existing questions (cascade deletes options)...")
                Question.objects.all().delete()

            options = []
            for b in blocks:
                q = Question.objects.create(
                    category=b["category"] or opts["category"],
                    difficulty=b["difficulty"] or opts["difficulty"],
                    text=b["text"],
                    explanation=b["explanation"],
                    is_active=True,
                )
                by_letter = dict(b["options"])
                options.extend(
                    QuestionOption(
                        question=q, label=letter, text=by_letter[letter],
                        is_correct=(letter == b["correct"]), order=order,
                    )
                    for order, letter in enumerate(LETTERS, start=1)
                    if letter in by_letter
                )
            QuestionOption.objects.bulk_create(options)

        self.stdout.write(self.style.SUCCESS(
            f"Import complete. Created {len(blocks)} question(s) and {len(options)} option(s)."
        ))
