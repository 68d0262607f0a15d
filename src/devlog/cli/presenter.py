"""Terminal rendering for devlog reports."""

from datetime import datetime
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.padding import Padding
from rich.panel import Panel
from rich.text import Text

from devlog.models.commit import Commit, CommitGroup

MAX_WIDTH = 75
MAX_LISTED_FILES = 3

ICONS = {
    "branch": "├",
    "last": "└",
    "pipe": "│",
    "header": "═",
    "bullet": "▸",
    "check": "✓",
    "arrow": "▶",
    "brain": "🧠",
    "sparkle": "✨",
}

# Conventional commit prefix -> style, checked in order.
PREFIX_STYLES = [
    ("feat", "green"),
    ("fix", "red"),
    ("docs", "blue"),
    ("refactor", "magenta"),
    ("test", "yellow"),
    ("chore", "grey50"),
]


def message_style(message: str) -> str:
    """Style for a commit subject based on its conventional prefix."""
    for prefix, style in PREFIX_STYLES:
        if message.startswith(prefix):
            return style
    return "white"


def format_relative_date(moment: datetime, now: Optional[datetime] = None) -> str:
    """Relative time within a day, absolute date beyond."""
    now = now or datetime.now().astimezone()
    elapsed = (now - moment).total_seconds()
    minutes = int(elapsed // 60)
    hours = int(elapsed // 3600)

    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    local = moment.astimezone()
    return f"{local:%b} {local.day}, {local:%I:%M %p}"


def format_file_list(files: List[str], limit: int = MAX_LISTED_FILES) -> str:
    """First few paths with an overflow count."""
    listed = ", ".join(files[:limit])
    if len(files) > limit:
        listed += f" +{len(files) - limit} more"
    return listed


class Presenter:
    """Writes devlog output to a rich console."""

    def __init__(
        self,
        console: Optional[Console] = None,
        show_files: bool = True,
        show_stats: bool = True,
    ):
        self.console = console or Console()
        self.show_files = show_files
        self.show_stats = show_stats

    def status(self, message: str):
        """Spinner shown while a slow step runs; use as a context manager."""
        return self.console.status(f"[dim]{escape(message)}[/dim]", spinner="dots")

    def banner(self) -> None:
        content = Text.assemble(
            ("devlog", "bold cyan"),
            (" — AI-powered developer journal\n", "dim"),
            (f"Powered by GitHub Copilot CLI {ICONS['sparkle']}", "dim"),
        )
        self.console.print()
        self.console.print(
            Panel(content, box=box.ROUNDED, border_style="cyan", expand=False, padding=1)
        )
        self.console.print()

    def header(self, title: str, subtitle: Optional[str] = None) -> None:
        self.console.print()
        self.console.print(
            f"[bold cyan]{ICONS['header'] * 2} {escape(title)}[/bold cyan]"
        )
        if subtitle:
            self.console.print(f"[dim]   {escape(subtitle)}[/dim]")
        self.console.print()

    def commit_list(self, commits: List[Commit]) -> None:
        """Tree-style list of commits with author, time and files."""
        if not commits:
            self.console.print("[dim]   No commits found.[/dim]")
            return

        for i, commit in enumerate(commits):
            is_last = i == len(commits) - 1
            prefix = ICONS["last"] if is_last else ICONS["branch"]
            pipe = " " if is_last else ICONS["pipe"]

            self.console.print(
                Text.assemble(
                    (f"   {prefix}", "dim"),
                    (f" {commit.hash_short}", "yellow"),
                    (f" {commit.message}", message_style(commit.message)),
                )
            )
            self.console.print(
                Text(
                    f"   {pipe}  {commit.author} • {format_relative_date(commit.date)}",
                    style="dim",
                )
            )
            if self.show_files and commit.files_changed:
                self.console.print(
                    Text.assemble(
                        (f"   {pipe}  ", "dim"),
                        (format_file_list(commit.files_changed), "dim italic"),
                    )
                )
            if not is_last:
                self.console.print(Text(f"   {pipe}", style="dim"))
        self.console.print()

    def grouped_commits(self, groups: List[CommitGroup]) -> None:
        for group in groups:
            self.console.print(
                Text.assemble(
                    (f"   {ICONS['arrow']} {group.label}", "bold white"),
                    (f" ({len(group.commits)} commits)", "dim"),
                )
            )
            self.console.print()
            self.commit_list(group.commits)

    def summary(self, title: str, content: str) -> None:
        if not content:
            return
        panel = Panel(
            Text(content),
            title=f"[bold cyan]{escape(title)}[/bold cyan]",
            title_align="left",
            box=box.ROUNDED,
            border_style="grey50",
            padding=1,
            width=MAX_WIDTH,
        )
        self.console.print(Padding(panel, (0, 0, 1, 3)))

    def release_notes(self, tag: str, content: str, commit_count: int) -> None:
        self.console.print(
            Text.assemble(
                ("   ", "dim"),
                (f"Release notes since {tag}", "bold magenta"),
                (f" ({commit_count} commits)", "dim"),
            )
        )
        self.console.print()
        for line in content.splitlines():
            self.console.print(Text(f"   {line}", style="white"))
        self.console.print()

    def stats(self, commits: List[Commit]) -> None:
        """One line with commit, author and file counts."""
        if not self.show_stats or not commits:
            return
        authors = {commit.author for commit in commits}
        files = {path for commit in commits for path in commit.files_changed}
        author_word = "author" if len(authors) == 1 else "authors"
        self.console.print(
            f"   [cyan]{len(commits)}[/cyan] commits[dim] • [/dim]"
            f"[cyan]{len(authors)}[/cyan] {author_word}[dim] • [/dim]"
            f"[cyan]{len(files)}[/cyan] files changed"
        )
        self.console.print()

    def section(self, title: str, style: str) -> None:
        self.console.print(f"[bold {style}]   {escape(title)}[/bold {style}]")

    def dim(self, message: str) -> None:
        self.console.print(f"[dim]   {escape(message)}[/dim]")

    def info(self, message: str) -> None:
        self.console.print(f"[dim]   {ICONS['check']} {escape(message)}[/dim]")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]   ⚠ {escape(message)}[/yellow]")

    def error(self, message: str) -> None:
        self.console.print(f"[red]   ✗ {escape(message)}[/red]", soft_wrap=True)

    def assistant_status(self, available: bool) -> None:
        if available:
            self.console.print(
                f"   [green]{ICONS['check']} GitHub Copilot CLI detected[/green]"
                f"[dim] — AI summaries enabled [/dim][green]{ICONS['brain']}[/green]"
            )
        else:
            self.console.print(
                "   [yellow]⚠ GitHub Copilot CLI not found[/yellow]"
                "[dim] — using local summaries[/dim]"
            )
            self.console.print(
                "[dim]     Install: [/dim]"
                "[cyan]gh extension install github/gh-copilot[/cyan]"
            )
        self.console.print()

    def footer(self) -> None:
        self.console.print(
            "[dim]   Generated by devlog • Powered by GitHub Copilot CLI[/dim]"
        )
        self.console.print()
