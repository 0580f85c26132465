"""
Issue Tracker CLI.

Every command restores the persisted session first, then talks to the REST
API through IssueTrackerClient. Errors are caught here, at the command
boundary, and printed as a single line.
"""

import argparse
import getpass
import sys
from datetime import date

import httpx
from dotenv import load_dotenv

from core.config import get_settings
from core.constants import PRIORITY_VALUES, STATUS_DISPLAY_ORDER, IssueStatus
from core.logging import configure_logging, get_logger

from ..aggregation import (
    FilterSpecification,
    apply_filters,
    group_by_status,
    status_suggestions,
    summarize,
)
from ..api import IssueTrackerClient
from ..cache import IssueListCache
from ..drafts import IssueDraft
from ..errors import IssueTrackerError, ValidationError
from ..session import AuthSession, TokenStore
from .formatters import format_detail, format_grouped, format_output

load_dotenv()

logger = get_logger("issue_tracker.cli")


class CommandContext:
    """Objects shared by one CLI invocation."""

    def __init__(self, client: IssueTrackerClient, session: AuthSession, out=None):
        self.client = client
        self.session = session
        self.cache = IssueListCache(client.list_issues)
        self.out = out or sys.stdout

    def echo(self, text: str = "") -> None:
        print(text, file=self.out)


def _prompt_password(args) -> str:
    return args.password or getpass.getpass("Password: ")


def _resolve_status(term: str) -> str:
    """Accept a full status name or any unambiguous part of one."""
    matches = status_suggestions(term)
    exact = [status for status in matches if status.lower() == term.strip().lower()]
    if exact:
        return exact[0]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        raise ValidationError(f"Unknown status '{term}'")
    raise ValidationError(f"Ambiguous status '{term}': {', '.join(matches)}")


# =============================================================================
# Auth commands
# =============================================================================


def cmd_register(ctx: CommandContext, args) -> int:
    """Create an account and sign in."""
    result = ctx.session.register(args.username, args.email, _prompt_password(args))
    ctx.echo(f"Registered and logged in as {result.user.username}")
    return 0


def cmd_login(ctx: CommandContext, args) -> int:
    result = ctx.session.login(args.email, _prompt_password(args))
    ctx.echo(f"Logged in as {result.user.username}")
    return 0


def cmd_logout(ctx: CommandContext, args) -> int:
    ctx.session.logout()
    ctx.echo("Logged out")
    return 0


def cmd_whoami(ctx: CommandContext, args) -> int:
    if not ctx.session.is_authenticated:
        ctx.echo("Not logged in")
        return 1
    user = ctx.session.user
    ctx.echo(f"{user.username} <{user.email}>")
    return 0


# =============================================================================
# Issue commands
# =============================================================================


def cmd_list(ctx: CommandContext, args) -> int:
    """List issues, optionally filtered and grouped into the status dashboard."""
    ctx.session.require_user()
    filters = FilterSpecification(
        search_term=args.search or "",
        statuses=[_resolve_status(term) for term in args.status or ()],
        priorities=args.priority or (),
        start_date=args.start_date,
        end_date=args.end_date,
    )
    # Dashboard counts describe the filtered view
    issues = apply_filters(ctx.cache.get(), filters)

    if args.group:
        ctx.echo(format_grouped(group_by_status(issues), summarize(issues)).rstrip("\n"))
    else:
        ctx.echo(format_output(issues, args.format, verbose=args.verbose).rstrip("\n"))
    return 0


def cmd_show(ctx: CommandContext, args) -> int:
    ctx.session.require_user()
    issue = ctx.client.get_issue(args.issue_id)
    ctx.echo(format_detail(issue).rstrip("\n"))
    return 0


def cmd_create(ctx: CommandContext, args) -> int:
    ctx.session.require_user()
    draft = IssueDraft(
        title=args.title,
        description=args.description,
        status=args.status,
        priority=args.priority,
    )
    issue = ctx.client.create_issue(draft.to_create_payload())
    ctx.cache.after_mutation()
    ctx.echo(f"Created issue {issue.id}: {issue.title}")
    return 0


def cmd_edit(ctx: CommandContext, args) -> int:
    """Send only the fields given on the command line."""
    ctx.session.require_user()
    draft = IssueDraft(
        title=args.title,
        description=args.description,
        status=args.status,
        priority=args.priority,
    )
    issue = ctx.client.update_issue(args.issue_id, draft.to_update_payload())
    ctx.cache.after_mutation()
    ctx.echo(f"Updated issue {issue.id}: {issue.title}")
    return 0


def _change_status(ctx: CommandContext, issue_id: str, new_status: str) -> int:
    ctx.session.require_user()
    current = ctx.client.get_issue(issue_id)
    if current.status == new_status:
        ctx.echo(f"Issue {issue_id} is already {new_status}")
        return 0
    changes = IssueDraft(status=new_status).to_update_payload()
    issue = ctx.client.update_issue(issue_id, changes)
    ctx.cache.after_mutation()
    ctx.echo(f"Issue {issue.id} is now {issue.status}")
    return 0


def cmd_status(ctx: CommandContext, args) -> int:
    return _change_status(ctx, args.issue_id, args.new_status)


def cmd_close(ctx: CommandContext, args) -> int:
    return _change_status(ctx, args.issue_id, IssueStatus.CLOSED.value)


def cmd_delete(ctx: CommandContext, args) -> int:
    ctx.session.require_user()
    if not args.yes:
        answer = input(f"Delete issue {args.issue_id}? This cannot be undone [y/N]: ")
        if answer.strip().lower() not in ("y", "yes"):
            ctx.echo("Aborted")
            return 1
    ctx.client.delete_issue(args.issue_id)
    ctx.cache.after_mutation()
    ctx.echo(f"Deleted issue {args.issue_id}")
    return 0


COMMANDS = {
    "register": cmd_register,
    "login": cmd_login,
    "logout": cmd_logout,
    "whoami": cmd_whoami,
    "list": cmd_list,
    "show": cmd_show,
    "create": cmd_create,
    "edit": cmd_edit,
    "status": cmd_status,
    "close": cmd_close,
    "delete": cmd_delete,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="issue-tracker",
        description="Issue Tracker - view, filter, create and edit issues",
    )
    parser.add_argument("--verbose-logs", action="store_true", help="Log debug output to stderr")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Auth commands
    register_parser = subparsers.add_parser("register", help="Create an account")
    register_parser.add_argument("--username", required=True)
    register_parser.add_argument("--email", required=True)
    register_parser.add_argument("--password", help="Prompted for when omitted")

    login_parser = subparsers.add_parser("login", help="Log in with email and password")
    login_parser.add_argument("--email", required=True)
    login_parser.add_argument("--password", help="Prompted for when omitted")

    subparsers.add_parser("logout", help="End the current session")
    subparsers.add_parser("whoami", help="Show the logged-in user")

    # List command
    list_parser = subparsers.add_parser("list", help="List issues")
    list_parser.add_argument("--search", "-s", help="Match text in title or description")
    list_parser.add_argument(
        "--status", action="append", help="Repeatable; any unambiguous part of a status name"
    )
    list_parser.add_argument(
        "--priority", action="append", choices=PRIORITY_VALUES, help="Repeatable"
    )
    list_parser.add_argument(
        "--from", dest="start_date", type=date.fromisoformat, help="Created on or after YYYY-MM-DD"
    )
    list_parser.add_argument(
        "--to", dest="end_date", type=date.fromisoformat, help="Created on or before YYYY-MM-DD"
    )
    list_parser.add_argument("--group", action="store_true", help="Group by status")
    list_parser.add_argument("--format", choices=["text", "json", "table"], default="text")
    list_parser.add_argument("--verbose", "-v", action="store_true")

    show_parser = subparsers.add_parser("show", help="Show an issue with its activity")
    show_parser.add_argument("issue_id")

    create_parser = subparsers.add_parser("create", help="Create an issue")
    create_parser.add_argument("--title", required=True)
    create_parser.add_argument("--description")
    create_parser.add_argument("--status", choices=STATUS_DISPLAY_ORDER)
    create_parser.add_argument("--priority", choices=PRIORITY_VALUES)

    edit_parser = subparsers.add_parser("edit", help="Change fields of an issue")
    edit_parser.add_argument("issue_id")
    edit_parser.add_argument("--title")
    edit_parser.add_argument("--description")
    edit_parser.add_argument("--status", choices=STATUS_DISPLAY_ORDER)
    edit_parser.add_argument("--priority", choices=PRIORITY_VALUES)

    status_parser = subparsers.add_parser("status", help="Move an issue to another status")
    status_parser.add_argument("issue_id")
    status_parser.add_argument("new_status", choices=STATUS_DISPLAY_ORDER)

    close_parser = subparsers.add_parser("close", help="Close an issue")
    close_parser.add_argument("issue_id")

    delete_parser = subparsers.add_parser("delete", help="Delete an issue")
    delete_parser.add_argument("issue_id")
    delete_parser.add_argument("--yes", "-y", action="store_true", help="Skip confirmation")

    return parser


def main(
    argv: list[str] | None = None,
    *,
    http_client: httpx.Client | None = None,
    token_store: TokenStore | None = None,
    out=None,
) -> int:
    """Main entry point with CLI interface."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(level="DEBUG" if args.verbose_logs else "WARNING", stream=sys.stderr)

    if args.command not in COMMANDS:
        parser.print_help()
        return 2

    settings = get_settings()
    client = IssueTrackerClient(http_client=http_client)
    session = AuthSession(client, token_store or TokenStore(settings.token_file))
    ctx = CommandContext(client, session, out=out)

    try:
        session.restore()
        return COMMANDS[args.command](ctx, args)
    except IssueTrackerError as e:
        logger.debug("command_failed", command=args.command, error_type=type(e).__name__)
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    finally:
        if http_client is None:
            client.close()


if __name__ == "__main__":
    sys.exit(main())
