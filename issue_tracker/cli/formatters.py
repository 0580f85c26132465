# Output formatters for the command-line client

import json
from datetime import datetime

from core.constants import URGENT_PRIORITIES

from ..activity import build_activity
from ..models import Issue

TITLE_WIDTH = 50


def format_timestamp(value: datetime | None) -> str:
    if value is None:
        return "-"
    return value.strftime("%b %d, %Y %H:%M")


def _priority_label(priority: str) -> str:
    return f"{priority}!" if priority in URGENT_PRIORITIES else priority


def format_text(issues: list[Issue], verbose: bool = False) -> str:
    """
    Format issues as plain text.

    Returns - Formatted text string
    """
    if not issues:
        return "No issues found.\n"

    output = []
    for i, issue in enumerate(issues, 1):
        output.append(f"\n{i}. {issue.title}")
        output.append(f"   ID: {issue.id}")
        output.append(f"   Status: {issue.status}  Priority: {_priority_label(issue.priority)}")
        if verbose:
            if issue.description:
                output.append(f"   {issue.description.splitlines()[0][:80]}")
            output.append(f"   Created: {format_timestamp(issue.created_at)}")
        output.append("")

    return "\n".join(output)


def format_json(issues: list[Issue]) -> str:
    """
    Format issues as JSON.

    Returns - JSON string
    """
    return json.dumps([issue.to_wire() for issue in issues], indent=2, default=str)


def format_table(issues: list[Issue], verbose: bool = False) -> str:
    """
    Format issues as a table.

    Returns - Table string
    """
    if not issues:
        return "No issues found.\n"

    if verbose:
        columns = ["#", "Title", "Status", "Priority", "Created", "ID"]
    else:
        columns = ["#", "Title", "Status", "Priority", "ID"]

    rows = []
    for i, issue in enumerate(issues, 1):
        row = {
            "#": str(i),
            "Title": issue.title[:TITLE_WIDTH],
            "Status": issue.status,
            "Priority": _priority_label(issue.priority),
            "Created": format_timestamp(issue.created_at),
            "ID": issue.id,
        }
        rows.append(row)

    widths = {col: max([len(col)] + [len(row[col]) for row in rows]) for col in columns}

    output = []
    header = " | ".join(col.ljust(widths[col]) for col in columns)
    output.append(header)
    output.append("-" * len(header))
    for row in rows:
        output.append(" | ".join(row[col].ljust(widths[col]) for col in columns))

    return "\n".join(output) + "\n"


def format_grouped(groups: dict[str, list[Issue]], counts: dict[str, int] | None = None) -> str:
    """Dashboard view: one section per non-empty status group."""
    output = []
    if counts:
        output.append("  ".join(f"{status}: {count}" for status, count in counts.items()))
    if not groups:
        output.append("No issues found.")
        return "\n".join(output) + "\n"

    for status, issues in groups.items():
        output.append(f"\n== {status} ({len(issues)}) ==")
        for issue in issues:
            output.append(f"  [{_priority_label(issue.priority)}] {issue.title[:TITLE_WIDTH]}  ({issue.id})")

    return "\n".join(output) + "\n"


def format_detail(issue: Issue) -> str:
    """Detail page: fields, description and the activity feed."""
    output = [
        issue.title,
        "=" * min(len(issue.title), 60),
        f"ID:       {issue.id}",
        f"Status:   {issue.status}",
        f"Priority: {_priority_label(issue.priority)}",
        f"Created:  {format_timestamp(issue.created_at)}",
        f"Updated:  {format_timestamp(issue.updated_at)}",
        "",
        "Description:",
        issue.description or "(no description)",
        "",
        "Activity:",
    ]
    for entry in build_activity(issue):
        output.append(f"  - {entry.label} at {format_timestamp(entry.timestamp)}")

    return "\n".join(output) + "\n"


def format_output(issues: list[Issue], format_type: str = "text", verbose: bool = False) -> str:
    """
    Format issues in the requested format.

    Raises:
        ValueError: For an unsupported format
    """
    format_type = format_type.lower()
    if format_type == "text":
        return format_text(issues, verbose=verbose)
    if format_type == "json":
        return format_json(issues)
    if format_type == "table":
        return format_table(issues, verbose=verbose)
    raise ValueError(f"Unsupported format: {format_type}")
