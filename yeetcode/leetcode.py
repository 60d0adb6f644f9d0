"""Pick a random LeetCode problem for a command; falls back to a fixed problem on error."""

import logging
import random
from enum import Enum
from typing import Any, Optional

import httpx

from . import config
from .interaction import InteractionRequest

logger = logging.getLogger(__name__)

PROBLEM_URL_TEMPLATE = "https://leetcode.com/problems/{slug}"
FALLBACK_PROBLEM_URL = PROBLEM_URL_TEMPLATE.format(slug="two-sum")

RANDOM_QUESTION_QUERY = """
query randomQuestion($categorySlug: String, $filters: QuestionListFilterInput) {
    randomQuestion(categorySlug: $categorySlug, filters: $filters) {
        titleSlug
    }
}"""


class Difficulty(str, Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class LeetCodeError(Exception):
    pass


def parse_difficulty(value: Any) -> Optional[Difficulty]:
    """Case-insensitive match of a command option to a Difficulty; None if it isn't one."""
    if not isinstance(value, str):
        return None
    try:
        return Difficulty(value.strip().upper())
    except ValueError:
        return None


def random_difficulty() -> Difficulty:
    return random.choice(list(Difficulty))


def fetch_random_question(difficulty: Difficulty) -> str:
    """Ask the LeetCode GraphQL API for a random question; returns its title slug."""
    payload = {
        "query": RANDOM_QUESTION_QUERY,
        "variables": {"categorySlug": "", "filters": {"difficulty": difficulty.value}},
    }
    headers = {
        "Content-Type": "application/json",
        "Origin": "https://leetcode.com",
        "Referer": "https://leetcode.com",
    }
    try:
        r = httpx.post(
            config.LEETCODE_GRAPHQL_URL,
            headers=headers,
            json=payload,
            timeout=config.LEETCODE_TIMEOUT_SECONDS,
        )
    except httpx.HTTPError as e:
        raise LeetCodeError(f"request failed: {e}") from e
    if not 200 <= r.status_code < 300:
        raise LeetCodeError(f"unexpected status {r.status_code}")
    try:
        data = r.json()
    except ValueError as e:
        raise LeetCodeError(f"response is not JSON: {e}") from e
    question = None
    if isinstance(data, dict) and isinstance(data.get("data"), dict):
        question = data["data"].get("randomQuestion")
    slug = question.get("titleSlug") if isinstance(question, dict) else None
    if not isinstance(slug, str) or not slug:
        raise LeetCodeError("response has no titleSlug")
    return slug


def question_content(interaction: InteractionRequest) -> str:
    """
    Content provider for command interactions: URL of a random problem at the
    requested difficulty (random difficulty when the option is absent or unknown).
    """
    difficulty = parse_difficulty(interaction.options.get("difficulty")) or random_difficulty()
    try:
        slug = fetch_random_question(difficulty)
    except LeetCodeError as e:
        logger.warning("LeetCode lookup failed (difficulty=%s): %s; using fallback", difficulty.value, e)
        return FALLBACK_PROBLEM_URL
    logger.info("Picked LeetCode problem %s (difficulty=%s)", slug, difficulty.value)
    return PROBLEM_URL_TEMPLATE.format(slug=slug)
