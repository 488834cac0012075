"""SQLite persistence for configs, summaries, groups and group reports."""
from .configs import InterviewConfig, StoredConfig, get_config, list_configs, put_config
from .group_summaries import GroupSummary, delete_group_summary, get_group_summary, put_group_summary
from .groups import Group, get_group, groups_containing, list_groups, merge_ids, put_group
from .migrate import migrate
from .sqlite import get_conn, utc_now
from .summaries import Summary, delete_summary, get_summary, list_summaries, put_summary

__all__ = [
    "InterviewConfig",
    "StoredConfig",
    "get_config",
    "list_configs",
    "put_config",
    "GroupSummary",
    "delete_group_summary",
    "get_group_summary",
    "put_group_summary",
    "Group",
    "get_group",
    "groups_containing",
    "list_groups",
    "merge_ids",
    "put_group",
    "migrate",
    "get_conn",
    "utc_now",
    "Summary",
    "delete_summary",
    "get_summary",
    "list_summaries",
    "put_summary",
]
