"""ticketgate entry point.

Two modes: pr (validate the pull request that triggered the run against its
Jira ticket) and ticket (check one explicit ticket id). Usage:
ticketgate [pr|ticket] [options]. Without a subcommand the ticket mode is
used when a ticket id is configured (TICKET_ID input), otherwise pr.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from ticketgate.adapters import GitHubAdapter, JiraAdapter
from ticketgate.config import AppConfig, ConfigError, load_config
from ticketgate.events import EventError, load_pull_request_event
from ticketgate.gate import ContextRefreshError, PullRequestGate
from ticketgate.logging import setup_logging
from ticketgate.models import ValidationOutcome
from ticketgate.reporter import OutcomeReporter

SUBCOMMANDS = ("pr", "ticket")

JIRA_SETTINGS = ("jira.base_url", "jira.user_email", "jira.api_token")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI with optional subcommand (pr | ticket)."""
    argv = argv if argv is not None else sys.argv[1:]
    sub = None
    rest = list(argv)
    if argv and argv[0] in SUBCOMMANDS:
        sub = argv[0]
        rest = argv[1:]

    parser = argparse.ArgumentParser(
        prog="ticketgate",
        description="Validate a pull request (or a single ticket) against Jira",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to YAML config file (optional)",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only load and validate config, then exit",
    )
    parser.add_argument("--pr", type=int, default=None, help="PR number (default: from event payload)")
    parser.add_argument("--repo", default=None, help="owner/repo (default: from event payload or GITHUB_REPOSITORY)")
    parser.add_argument("--ticket", default=None, help="Ticket id for ticket mode (default: TICKET_ID input)")
    parser.add_argument("--base", default=None, help="Destination branch for release rules in ticket mode")
    parsed = parser.parse_args(rest)
    parsed.subcommand = sub
    return parsed


def build_gate(config: AppConfig, with_platform: bool = True) -> PullRequestGate:
    """Create adapters from config; raise ConfigError if credentials are missing."""
    required = ("github.token",) + JIRA_SETTINGS if with_platform else JIRA_SETTINGS
    config.require(*required)
    timeout = config.gate.timeout_seconds
    tracker = JiraAdapter(
        base_url=config.jira.base_url or "",
        user_email=config.jira.user_email or "",
        api_token=config.jira_api_token_resolved or "",
        timeout=timeout,
    )
    platform = None
    if with_platform:
        platform = GitHubAdapter(
            token=config.github_token_resolved or "",
            api_url=config.github.api_url,
            timeout=timeout,
        )
    return PullRequestGate(platform, tracker)


def run_pr_check(config: AppConfig, args: argparse.Namespace) -> ValidationOutcome:
    """Validate the triggering (or given) pull request."""
    log = logging.getLogger("ticketgate.main")
    repo = args.repo or config.github.repository
    pr_number = args.pr
    if pr_number is None:
        if not config.github.event_path:
            raise EventError("No --pr given and GITHUB_EVENT_PATH is not set")
        event = load_pull_request_event(Path(config.github.event_path), default_repo=repo)
        pr_number = event.pr_number
        repo = args.repo or event.repo
    if not repo:
        raise ConfigError("Missing required settings: github.repository")
    gate = build_gate(config)
    log.info("Validating %s#%s", repo, pr_number)
    return gate.validate(repo, pr_number)


def run_ticket_check(config: AppConfig, args: argparse.Namespace) -> ValidationOutcome:
    """Check an explicit ticket id without a pull request."""
    log = logging.getLogger("ticketgate.main")
    ticket_id = args.ticket or config.gate.ticket_id
    if not ticket_id:
        raise ConfigError("Missing required settings: gate.ticket_id")
    base_branch = args.base or config.gate.base_branch
    gate = build_gate(config, with_platform=False)
    log.info("Checking ticket %s (base=%s)", ticket_id, base_branch or "-")
    return gate.check_ticket(ticket_id, base_branch=base_branch)


def main(argv: list[str] | None = None) -> int:
    """Entry point: dispatch to pr or ticket mode and report the outcome."""
    args = parse_args(argv)
    log = logging.getLogger("ticketgate.main")

    try:
        config = load_config(args.config)
    except Exception as e:
        # Settings are unusable: report through the runner's own GITHUB_OUTPUT
        setup_logging()
        log.exception("Invalid configuration: %s", e)
        env_output = os.environ.get("GITHUB_OUTPUT")
        reporter = OutcomeReporter(output_path=Path(env_output) if env_output else None)
        return reporter.report_error(ConfigError(f"Invalid configuration: {e}"))
    setup_logging(config.logging)

    if args.check:
        print("Config OK:", config.github.repository or "-", config.jira.base_url or "-")
        return 0

    subcommand = args.subcommand or ("ticket" if (args.ticket or config.gate.ticket_id) else "pr")
    output_path = Path(config.github.output) if config.github.output else None
    reporter = OutcomeReporter(output_path=output_path)

    try:
        if subcommand == "ticket":
            outcome = run_ticket_check(config, args)
        else:
            outcome = run_pr_check(config, args)
    except ContextRefreshError as e:
        log.error("%s: %s (cause: %s)", e.failure.value, e, e.__cause__)
        return reporter.report_error(e)
    except (EventError, ConfigError) as e:
        log.error("%s", e)
        return reporter.report_error(e)
    except Exception as e:
        log.exception("Fatal error: %s", e)
        return reporter.report_error(e)
    return reporter.report(outcome)


if __name__ == "__main__":
    sys.exit(main())
