"""Command-line helpers for inspecting the interview hub tables."""
from __future__ import annotations

import argparse
import json

from config.settings import settings
from storage import get_group, get_group_summary, list_configs, list_groups, list_summaries


def tail_configs(limit: int = 20) -> None:
    for row in list_configs(limit=limit):
        group = (row.meta or {}).get("groupId", "-")
        print(f"[{row.updatedAt}] {row.interviewId} group={group} questions={len(row.config.questions)}")


def tail_summaries(limit: int = 20) -> None:
    for row in list_summaries(limit=limit):
        first_line = row.summary.splitlines()[0] if row.summary else ""
        print(f"[{row.createdAt}] {row.interviewId} chars={len(row.summary)} :: {first_line[:80]}")


def tail_groups(limit: int = 20) -> None:
    for group in list_groups(limit=limit):
        try:
            cached = get_group_summary(group.groupId).createdAt
        except KeyError:
            cached = "-"
        label = group.restaurantName or "-"
        print(
            f"[{group.updatedAt}] {group.groupId} ({label}) interviews={len(group.interviewIds)} report={cached}"
        )


def show_group(group_id: str) -> None:
    print(json.dumps(get_group(group_id).model_dump(), indent=2, ensure_ascii=False))


def main() -> None:
    parser = argparse.ArgumentParser(description=f"Inspect {settings.DB_PATH}")
    parser.add_argument("--tail-configs", type=int, help="Show the most recently saved interview configs")
    parser.add_argument("--tail-summaries", type=int, help="Show the latest individual summaries")
    parser.add_argument("--tail-groups", type=int, help="Show the most recently updated groups")
    parser.add_argument("--group", help="Print one group as JSON")
    args = parser.parse_args()

    if args.tail_configs:
        tail_configs(args.tail_configs)
    if args.tail_summaries:
        tail_summaries(args.tail_summaries)
    if args.tail_groups:
        tail_groups(args.tail_groups)
    if args.group:
        show_group(args.group)


if __name__ == "__main__":
    main()
