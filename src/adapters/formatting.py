"""Shared reply formatting helpers.

Keeping formatting here prevents drift between adapters and keeps messages
consistent. Everything is rendered as Telegram HTML.
"""

from __future__ import annotations

import html
from typing import Any, Optional

from core.models import RatingChange

NA = "N/A"
TIER_GROUPS = ["Bronze", "Silver", "Gold", "Platinum", "Diamond", "Ruby"]
TIER_STEPS = ["V", "IV", "III", "II", "I"]
CLASS_DECORATIONS = {"none": "", "silver": "+", "gold": "++"}
DEFAULT_PROFILE_IMAGE = "https://static.solved.ac/misc/360x360/default_profile.png"


def _int_field(record: dict[str, Any], key: str) -> Optional[int]:
    value = record.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def int_or_na(record: dict[str, Any], key: str) -> str:
    value = _int_field(record, key)
    return NA if value is None else str(value)


def str_or_na(record: dict[str, Any], key: str) -> str:
    value = record.get(key)
    return value if isinstance(value, str) else NA


def _graded_name(level: int) -> str:
    return f"{TIER_GROUPS[(level - 1) // 5]} {TIER_STEPS[(level - 1) % 5]}"


def level_to_name(level: Optional[int]) -> Optional[str]:
    """Problem difficulty name, e.g. 11 -> "Gold V"."""

    if level == 0:
        return "Unrated"
    if level is not None and 1 <= level <= 30:
        return _graded_name(level)
    return None


def tier_to_name(tier: Optional[int]) -> Optional[str]:
    """User tier name; like problem levels plus "Unranked" and "Master"."""

    if tier == 0:
        return "Unranked"
    if tier == 31:
        return "Master"
    if tier is not None and 1 <= tier <= 30:
        return _graded_name(tier)
    return None


def class_to_name(user_class: Optional[int], decoration: str) -> Optional[str]:
    if user_class is None or decoration not in CLASS_DECORATIONS:
        return None
    return f"{user_class}{CLASS_DECORATIONS[decoration]}"


def problem_level_name(problem: dict[str, Any]) -> str:
    return level_to_name(_int_field(problem, "level")) or NA


def format_problem_link(problem: dict[str, Any]) -> str:
    """One problem as a tier-labelled link to its statement."""

    problem_id = int_or_na(problem, "problemId")
    title = html.escape(str_or_na(problem, "titleKo"))
    level = html.escape(problem_level_name(problem))
    return f'<a href="https://boj.kr/{problem_id}">{level} - #{problem_id} {title}</a>'


def format_problem_list(problems: list[dict[str, Any]]) -> str:
    return "\n".join(format_problem_link(problem) for problem in problems)


def format_search_result(problem: dict[str, Any]) -> str:
    """Message body sent when an inline search result is picked."""

    text = format_problem_link(problem)
    notes = []
    if problem.get("isPartial") is True:
        notes.append(" [partial score / subtask]")
    if problem.get("isSolvable") is False:
        notes.append(" (not yet judged)")
    if notes:
        text += "\n" + "".join(notes)
    return text


def format_user_profile(user: dict[str, Any]) -> str:
    """Caption for the /user reply."""

    tier = tier_to_name(_int_field(user, "tier")) or NA
    user_class = class_to_name(_int_field(user, "class"), str_or_na(user, "classDecoration")) or NA
    bio = user.get("bio")
    parts = []
    if isinstance(bio, str) and bio:
        parts.extend([f"<i>{html.escape(bio)}</i>", ""])
    parts.extend(
        [
            f"<b>{html.escape(tier)}</b>, class <b>{html.escape(user_class)}</b>",
            (
                f"Rank <b>{int_or_na(user, 'rank')}</b>, "
                f"<b>{int_or_na(user, 'solvedCount')}</b> solved, "
                f"<b>{int_or_na(user, 'voteCount')}</b> contributed, "
                f"<b>{int_or_na(user, 'rivalCount')}</b> rivals"
            ),
            (
                f"Rating <b>{int_or_na(user, 'rating')}</b> "
                f"(difficulty <b>{int_or_na(user, 'rating')}</b> "
                f"+ class <b>{int_or_na(user, 'ratingByClass')}</b> "
                f"+ solved <b>{int_or_na(user, 'ratingBySolvedCount')}</b> "
                f"+ votes <b>{int_or_na(user, 'ratingByVoteCount')}</b>)"
            ),
        ]
    )
    return "\n".join(parts)


def profile_image_url(user: dict[str, Any]) -> str:
    url = user.get("profileImageUrl")
    if not isinstance(url, str) or not url:
        return DEFAULT_PROFILE_IMAGE
    return url.replace("profile/", "profile/360x360/")


def profile_links(handle: str) -> list[tuple[str, str]]:
    """(label, url) pairs for the profile buttons."""

    return [
        ("solved.ac profile", f"https://solved.ac/profile/{handle}"),
        ("acmicpc.net profile", f"https://acmicpc.net/user/{handle}"),
    ]


def format_subscribed(handle: str) -> str:
    return f"Rating notifications for <b>{html.escape(handle)}</b> are now on."


def format_rating_change(change: RatingChange) -> str:
    """Notification body for a tracked rating change."""

    handle = html.escape(change.target_handle)
    tier = html.escape(tier_to_name(_int_field(change.live_record, "tier")) or NA)
    sign = "+" if change.delta > 0 else ""
    return "\n".join(
        [
            f'<b><a href="https://solved.ac/profile/{handle}">{handle}</a></b> rating changed',
            f"{change.old_rating} → <b>{change.new_rating}</b> ({sign}{change.delta})",
            f"Tier: <b>{tier}</b>",
        ]
    )
