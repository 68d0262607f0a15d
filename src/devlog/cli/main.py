"""Main CLI interface for devlog."""

import functools
import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import click
from git.exc import GitCommandError
from rich.console import Console
from rich.markup import escape

from devlog.cli.export import (
    export_daily_markdown,
    export_json,
    export_release_markdown,
    export_weekly_markdown,
)
from devlog.cli.presenter import Presenter
from devlog.core.assistant import CopilotCLI
from devlog.core.config import load_config, sample_config
from devlog.core.grouping import group_commits_by_date
from devlog.core.repository import GitHistoryReader
from devlog.core.summarizer import CopilotSummarizer, summarize_with_fallback
from devlog.errors import DevlogError, InvalidRange
from devlog.models.commit import Commit
from devlog.models.config import Config, OutputFormat
from devlog.models.report import RangeRefs, ReportEnvelope, Summary

logger = logging.getLogger(__name__)
logging.getLogger("devlog").addHandler(logging.NullHandler())

DEBUG_LOG = Path.home() / ".devlog" / "devlog-debug.log"


def parse_range(value: str) -> Tuple[str, str]:
    """Split ``<from>..<to>`` into its two references."""
    parts = value.split("..")
    if len(parts) != 2 or not all(part.strip() for part in parts):
        raise InvalidRange(value)
    return parts[0].strip(), parts[1].strip()


def fetch_all(*calls: Callable):
    """Run independent read-only queries concurrently, results in call order."""
    with ThreadPoolExecutor(max_workers=len(calls)) as pool:
        futures = [pool.submit(call) for call in calls]
        return [future.result() for future in futures]


def long_date(day: date) -> str:
    return f"{day:%A, %B} {day.day}, {day.year}"


class RunContext:
    """Everything one command invocation needs, resolved once up front."""

    def __init__(
        self,
        cwd: Path,
        config: Config,
        assistant: CopilotCLI,
        output: Optional[str] = None,
        as_json: bool = False,
        want_summary: bool = True,
    ):
        self.cwd = cwd
        self.config = config
        self.assistant = assistant
        self.output = output
        self.as_json = as_json or config.format == OutputFormat.JSON
        self.markdown_stdout = (
            config.format == OutputFormat.MARKDOWN and not output and not self.as_json
        )
        self.want_summary = want_summary
        self.summarizer: Optional[CopilotSummarizer] = None

        # Keep stdout clean when it carries a machine-readable document.
        machine_output = self.as_json or self.markdown_stdout
        self.presenter = Presenter(
            Console(stderr=machine_output),
            show_files=config.show_files,
            show_stats=config.show_stats,
        )

    @classmethod
    def from_obj(cls, obj: dict, output=None, as_json=False, ai=True) -> "RunContext":
        cwd = Path(obj.get("cwd") or Path.cwd())
        config = load_config(cwd, obj.get("home"))
        assistant = obj.get("assistant") or CopilotCLI()
        return cls(cwd, config, assistant, output, as_json, ai)

    def open_reader(self) -> GitHistoryReader:
        return GitHistoryReader(self.cwd, max_commits=self.config.max_commits)

    def begin(self) -> None:
        """Print the banner and decide whether AI summaries are used."""
        presenter = self.presenter
        presenter.banner()
        if not self.want_summary:
            presenter.dim("AI summaries skipped (--no-ai)")
            presenter.console.print()
            return
        if not self.config.use_copilot:
            presenter.dim("AI summaries disabled in config (useCopilot: false)")
            presenter.console.print()
            return

        with presenter.status("Checking for GitHub Copilot CLI..."):
            available = self.assistant.is_available()
        logger.debug("AI assistant available: %s", available)
        presenter.assistant_status(available)
        if available:
            self.summarizer = CopilotSummarizer(self.assistant)

    def summarize(
        self,
        generate: Callable[[CopilotSummarizer], str],
        commits: List[Commit],
        message: str,
    ) -> Optional[Summary]:
        """AI summary when possible, local summary otherwise, None on --no-ai."""
        if not self.want_summary:
            return None

        primary = None
        if self.summarizer is not None:
            summarizer = self.summarizer

            def primary() -> str:
                with self.presenter.status(message):
                    return generate(summarizer)

        return summarize_with_fallback(primary, commits)

    def export(
        self,
        markdown: Callable[[], str],
        envelope: Callable[[], ReportEnvelope],
    ) -> None:
        if self.output:
            Path(self.output).write_text(markdown(), encoding="utf-8")
            self.presenter.info(f"Saved to {self.output}")
        elif self.markdown_stdout:
            click.echo(markdown())
        if self.as_json:
            click.echo(export_json(envelope()))


def summary_text(summary: Optional[Summary]) -> str:
    return summary.text if summary else ""


def show_summary(
    presenter: Presenter, summary: Optional[Summary], ai_title: str, local_title: str
) -> None:
    if summary is None:
        return
    presenter.summary(ai_title if summary.from_ai else local_title, summary.text)


def first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""


def git_error_message(error: GitCommandError) -> str:
    """git's own complaint from a failed command, without the "fatal:" prefix."""
    stderr = str(error.stderr or "").strip()
    if stderr.startswith("stderr:"):
        stderr = stderr[len("stderr:") :].strip().lstrip("'").rstrip("'")
    line = first_line(stderr)
    for prefix in ("fatal:", "error:"):
        if line.startswith(prefix):
            line = line[len(prefix) :].strip()
    return line or f"git command failed with exit code {error.status}"


def handle_errors(func):
    """Print any failure as a single line and exit with status 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DevlogError as e:
            Presenter(Console(stderr=True)).error(first_line(str(e)))
        except GitCommandError as e:
            logger.debug("Command %s failed", func.__name__, exc_info=True)
            Presenter(Console(stderr=True)).error(git_error_message(e))
        except Exception as e:
            logger.debug("Command %s failed", func.__name__, exc_info=True)
            message = first_line(str(e)) or e.__class__.__name__
            Presenter(Console(stderr=True)).error(message)
        sys.exit(1)

    return wrapper


def report_options(func):
    """Options shared by every report command."""
    func = click.option(
        "--ai/--no-ai", default=True, help="Use AI summarization (default: on)"
    )(func)
    func = click.option("--json", "as_json", is_flag=True, help="Output as JSON")(func)
    func = click.option(
        "-o",
        "--output",
        type=click.Path(dir_okay=False, writable=True),
        help="Save output to a markdown file",
    )(func)
    return func


def _configure_debug_log() -> None:
    DEBUG_LOG.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(DEBUG_LOG, encoding="utf-8")
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    package_logger = logging.getLogger("devlog")
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)


@click.group()
@click.version_option(package_name="devlog")
@click.option("--debug", is_flag=True, help=f"Write a debug log to {DEBUG_LOG}")
@click.pass_context
def main(ctx: click.Context, debug: bool):
    """devlog - turn your git history into meaningful narratives.

    Summaries are written by GitHub Copilot CLI when it is installed, with a
    local keyword-based summary as fallback.
    """
    ctx.ensure_object(dict)
    if debug:
        _configure_debug_log()


@main.command()
@report_options
@click.pass_obj
@handle_errors
def today(obj: dict, output: Optional[str], as_json: bool, ai: bool):
    """Summarize what you've worked on today."""
    run = RunContext.from_obj(obj, output, as_json, ai)
    reader = run.open_reader()
    run.begin()
    p = run.presenter

    with p.status("Reading git history..."):
        commits, repo_name, branch, git_author = fetch_all(
            reader.commits_today,
            reader.repo_name,
            reader.current_branch,
            reader.author_name,
        )
    author = run.config.author or git_author

    p.header(f"Today's Work — {repo_name}", f"Branch: {branch} • Author: {author}")

    if not commits:
        p.warning("No commits found for today. Time to get coding!")
        p.footer()
        return

    p.stats(commits)
    p.commit_list(commits)

    summary = run.summarize(
        lambda s: s.daily(commits, repo_name, author),
        commits,
        "Generating AI summary with Copilot CLI...",
    )
    show_summary(p, summary, "AI Summary", "Summary")

    now = datetime.now().astimezone()
    run.export(
        lambda: export_daily_markdown(
            repo_name, long_date(now.date()), commits, summary_text(summary)
        ),
        lambda: ReportEnvelope(
            type="daily",
            repo=repo_name,
            branch=branch,
            author=author,
            date=now.isoformat(),
            commit_count=len(commits),
            commits=commits,
            summary=summary_text(summary),
        ),
    )
    p.footer()


@main.command()
@report_options
@click.pass_obj
@handle_errors
def standup(obj: dict, output: Optional[str], as_json: bool, ai: bool):
    """Generate a standup-ready report."""
    run = RunContext.from_obj(obj, output, as_json, ai)
    reader = run.open_reader()
    run.begin()
    p = run.presenter

    with p.status("Preparing standup report..."):
        yesterday, today_commits, repo_name, branch, git_author = fetch_all(
            reader.commits_yesterday,
            reader.commits_today,
            reader.repo_name,
            reader.current_branch,
            reader.author_name,
        )
    author = run.config.author or git_author
    now = datetime.now().astimezone()

    p.header(f"Standup Report — {repo_name}", f"Branch: {branch} • {long_date(now.date())}")

    if yesterday:
        p.section("Yesterday:", "blue")
        p.commit_list(yesterday)
    else:
        p.dim("No commits yesterday.")
        p.console.print()

    if today_commits:
        p.section("Today so far:", "green")
        p.commit_list(today_commits)
    else:
        p.dim("No commits today yet.")
        p.console.print()

    all_commits = yesterday + today_commits
    summary = run.summarize(
        lambda s: s.standup(yesterday, today_commits, repo_name, author),
        all_commits,
        "Generating AI standup with Copilot CLI...",
    )
    show_summary(p, summary, "AI Standup Report", "Summary")

    run.export(
        lambda: export_daily_markdown(
            repo_name, long_date(now.date()), all_commits, summary_text(summary)
        ),
        lambda: ReportEnvelope(
            type="standup",
            repo=repo_name,
            branch=branch,
            author=author,
            date=now.isoformat(),
            yesterday=yesterday,
            today=today_commits,
            summary=summary_text(summary),
        ),
    )
    p.footer()


@main.command()
@report_options
@click.pass_obj
@handle_errors
def week(obj: dict, output: Optional[str], as_json: bool, ai: bool):
    """Summarize this week's work."""
    run = RunContext.from_obj(obj, output, as_json, ai)
    reader = run.open_reader()
    run.begin()
    p = run.presenter

    with p.status("Reading weekly git history..."):
        commits, repo_name, branch, git_author = fetch_all(
            reader.commits_this_week,
            reader.repo_name,
            reader.current_branch,
            reader.author_name,
        )
    author = run.config.author or git_author

    p.header(f"Weekly Recap — {repo_name}", f"Branch: {branch} • Author: {author}")

    if not commits:
        p.warning("No commits found this week.")
        p.footer()
        return

    p.stats(commits)
    groups = group_commits_by_date(commits)
    p.grouped_commits(groups)

    summary = run.summarize(
        lambda s: s.weekly(commits, repo_name, author),
        commits,
        "Generating weekly AI recap with Copilot CLI...",
    )
    show_summary(p, summary, "AI Weekly Recap", "Weekly Summary")

    run.export(
        lambda: export_weekly_markdown(
            repo_name, groups, summary_text(summary), len(commits)
        ),
        lambda: ReportEnvelope(
            type="weekly",
            repo=repo_name,
            branch=branch,
            author=author,
            week=datetime.now().astimezone().isoformat(),
            commit_count=len(commits),
            groups=groups,
            summary=summary_text(summary),
        ),
    )
    p.footer()


@main.command()
@report_options
@click.pass_obj
@handle_errors
def release(obj: dict, output: Optional[str], as_json: bool, ai: bool):
    """Generate release notes from commits since the last tag."""
    run = RunContext.from_obj(obj, output, as_json, ai)
    reader = run.open_reader()
    run.begin()
    p = run.presenter

    with p.status("Finding latest tag and commits..."):
        (tag, commits), repo_name = fetch_all(
            reader.commits_since_last_tag, reader.repo_name
        )

    p.header(f"Release Notes — {repo_name}", f"Since tag: {tag} • {len(commits)} commits")

    if not commits:
        p.warning("No new commits since last tag.")
        p.footer()
        return

    p.stats(commits)
    p.commit_list(commits)

    summary = run.summarize(
        lambda s: s.release(commits, repo_name, tag),
        commits,
        "Generating AI release notes with Copilot CLI...",
    )
    if summary is not None and summary.from_ai:
        p.release_notes(tag, summary.text, len(commits))
    else:
        show_summary(p, summary, "Release Notes", "Release Summary")

    run.export(
        lambda: export_release_markdown(repo_name, tag, commits, summary_text(summary)),
        lambda: ReportEnvelope(
            type="release",
            repo=repo_name,
            tag=tag,
            commit_count=len(commits),
            commits=commits,
            release_notes=summary_text(summary),
        ),
    )
    p.footer()


@main.command()
@click.argument("commit_range", metavar="RANGE")
@report_options
@click.pass_obj
@handle_errors
def recap(obj: dict, commit_range: str, output: Optional[str], as_json: bool, ai: bool):
    """Summarize a custom commit range (e.g. abc123..def456 or HEAD~10..HEAD)."""
    from_ref, to_ref = parse_range(commit_range)
    run = RunContext.from_obj(obj, output, as_json, ai)
    reader = run.open_reader()
    run.begin()
    p = run.presenter

    with p.status(f"Reading commits {from_ref}..{to_ref}..."):
        commits, repo_name = fetch_all(
            lambda: reader.commits_in_range(from_ref, to_ref), reader.repo_name
        )

    p.header(f"Recap — {repo_name}", f"Range: {from_ref}..{to_ref}")

    if not commits:
        p.warning("No commits found in this range.")
        p.footer()
        return

    p.stats(commits)
    p.grouped_commits(group_commits_by_date(commits))

    summary = run.summarize(
        lambda s: s.range(commits, repo_name, from_ref, to_ref),
        commits,
        "Generating AI recap with Copilot CLI...",
    )
    show_summary(p, summary, "AI Recap", "Recap")

    run.export(
        lambda: export_daily_markdown(
            repo_name, f"{from_ref}..{to_ref}", commits, summary_text(summary)
        ),
        lambda: ReportEnvelope(
            type="recap",
            repo=repo_name,
            range=RangeRefs(from_ref=from_ref, to_ref=to_ref),
            commit_count=len(commits),
            commits=commits,
            summary=summary_text(summary),
        ),
    )
    p.footer()


@main.command()
@click.pass_obj
@handle_errors
def init(obj: dict):
    """Create a .devlogrc config file in the current directory."""
    cwd = Path(obj.get("cwd") or Path.cwd())
    presenter = Presenter()
    config_path = cwd / ".devlogrc"

    if config_path.exists():
        presenter.warning(".devlogrc already exists in this directory.")
        return

    config_path.write_text(sample_config() + "\n", encoding="utf-8")
    presenter.info(f"Created .devlogrc in {cwd}")


@main.command()
@click.pass_obj
@handle_errors
def status(obj: dict):
    """Check devlog setup and Copilot CLI availability."""
    run = RunContext.from_obj(obj)
    reader = run.open_reader()
    p = run.presenter
    p.banner()

    repo_name, branch, author = fetch_all(
        reader.repo_name, reader.current_branch, reader.author_name
    )

    p.header("Status")
    p.info(f"Repository: {repo_name}")
    p.info(f"Branch: {branch}")
    p.info(f"Author: {run.config.author or author}")
    p.console.print()

    with p.status("Checking for GitHub Copilot CLI..."):
        available = run.assistant.is_available()
    p.assistant_status(available)

    p.info(
        f"Config: format={run.config.format.value}, "
        f"useCopilot={str(run.config.use_copilot).lower()}"
    )
    p.console.print()
    p.footer()


def run():
    """Console script entry point."""
    try:
        main()
    except Exception as e:
        Console(stderr=True).print(f"[red]Unexpected error: {escape(str(e))}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    run()
