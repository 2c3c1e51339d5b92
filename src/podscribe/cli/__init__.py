"""Command line interface for podscribe."""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Callable
from pathlib import Path

import questionary
from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.theme import Theme

from podscribe.core import (
    ConfigurationError,
    PodcastResult,
    PodcastStatus,
    PodscribeConfig,
    ProgressEvent,
    ProviderError,
    RetryConfig,
)
from podscribe.core.config import PROVIDER_LABELS, REPORT_PROVIDER_LABELS
from podscribe.core.doctor import check_dependencies
from podscribe.core.provider_factory import create_report_generator
from podscribe.export import read_results_json, write_results_json
from podscribe.pipeline import PodcastPipeline
from podscribe.report import generate_report, render_report_markdown, write_report

PODSCRIBE_THEME = Theme(
    {
        "info": "bold cyan",
        "success": "bold green",
        "warning": "bold yellow",
        "error": "bold red",
        "highlight": "bold magenta",
        "dim": "grey50",
    }
)

QUESTIONARY_STYLE = questionary.Style(
    [
        ("qmark", "fg:#00ffff bold"),
        ("question", "bold"),
        ("answer", "fg:#00ff00 bold"),
        ("pointer", "fg:#00ffff bold"),
        ("highlighted", "fg:#00ffff bold bg:default noreverse"),
        ("selected", "fg:default bg:default noreverse"),
        ("choice", "fg:default bg:default noreverse"),
    ]
)

STATUS_STYLES = {
    PodcastStatus.SUCCESS: "success",
    PodcastStatus.DOWNLOAD_FAILED: "error",
    PodcastStatus.TRANSCRIPTION_FAILED: "warning",
    PodcastStatus.PENDING: "dim",
}

console = Console(theme=PODSCRIBE_THEME)


def validate_api_key(provider: str) -> Callable[[str], bool | str]:
    """Return a validation function for a specific provider."""
    prefixes = {
        "openai": "sk-",
        "groq": "gsk_",
    }

    def validator(text: str) -> bool | str:
        if not text:
            return f"{PROVIDER_LABELS[provider]} API key cannot be empty"
        prefix = prefixes.get(provider)
        if prefix and not text.startswith(prefix):
            return f"{PROVIDER_LABELS[provider]} keys must start with '{prefix}'"
        if len(text) < 20:
            return f"{PROVIDER_LABELS[provider]} key is too short"
        return True

    return validator


def merge_env_file(env_path: Path, new_config: dict[str, str]) -> None:
    """Write ``new_config`` into ``env_path``, replacing earlier PODSCRIBE_ lines."""
    final_lines: list[str] = []

    if env_path.exists():
        for line in env_path.read_text().splitlines(keepends=True):
            stripped = line.strip()
            if not stripped or stripped.startswith("#") or not stripped.startswith("PODSCRIBE_"):
                final_lines.append(line)
        if final_lines and not final_lines[-1].endswith("\n"):
            final_lines.append("\n")
        final_lines.append("\n# Updated podscribe configuration\n")
    else:
        final_lines.append("# podscribe configuration\n")

    for key, val in new_config.items():
        final_lines.append(f"{key}={val}\n")

    env_path.write_text("".join(final_lines))


async def setup_cmd() -> None:
    """Run interactive setup to create .env file using arrow-key selection."""
    console.print(Panel("podscribe Configuration Setup", style="info", expand=False))
    console.print("This utility will write your transcription settings to .env.\n", style="dim")

    try:
        provider = await questionary.select(
            "Select Transcription Provider:",
            choices=list(PROVIDER_LABELS),
            style=QUESTIONARY_STYLE,
        ).ask_async()
        if provider is None:
            return

        key = await questionary.password(
            f"Enter {PROVIDER_LABELS[provider]} API Key:",
            validate=validate_api_key(provider),
            style=QUESTIONARY_STYLE,
        ).ask_async()
        if key is None:
            return

        merge_env_file(
            Path(".env"),
            {
                "PODSCRIBE_TRANSCRIPTION_PROVIDER": provider,
                f"PODSCRIBE_{provider.upper()}_API_KEY": key,
            },
        )
        console.print("\n[success]Configuration updated in .env[/]")

    except KeyboardInterrupt:
        return


def read_url_file(path: Path) -> list[str]:
    """One link per line; blank lines and ``#`` comments are skipped."""
    lines = path.read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip() and not line.strip().startswith("#")]


def render_results(results: list[PodcastResult]) -> None:
    table = Table(
        box=None,
        show_header=True,
        header_style="highlight",
        title="Results",
        title_justify="left",
        title_style="dim",
        pad_edge=False,
    )
    table.add_column("#", style="dim", width=3)
    table.add_column("Title", ratio=3)
    table.add_column("Date", ratio=1)
    table.add_column("Size (MB)", justify="right", ratio=1)
    table.add_column("Words", justify="right", ratio=1)
    table.add_column("Status", ratio=2)

    for i, result in enumerate(results, 1):
        style = STATUS_STYLES.get(result.status, "dim")
        table.add_row(
            str(i),
            result.title or result.source_url,
            result.date or "-",
            f"{result.file_size_mb:.2f}" if result.file_size_mb is not None else "-",
            str(result.word_count) if result.word_count is not None else "-",
            f"[{style}]{result.status}[/]",
        )
    console.print(table)

    for result in results:
        if result.error:
            console.print(f"[error]{result.source_url}:[/] {result.error}")


async def extract_cmd(
    urls: list[str],
    url_file: Path | None = None,
    provider: str | None = None,
    output: Path | None = None,
) -> int:
    """Transcribe a batch of links and report the outcome.

    Returns:
        Process exit code: 0 if every link was transcribed, 1 otherwise.
    """
    inputs = list(urls)
    if url_file is not None:
        inputs.extend(read_url_file(url_file))

    config = PodscribeConfig()
    if provider:
        config = config.model_copy(update={"transcription_provider": provider})

    pipeline = PodcastPipeline(config)
    results: list[PodcastResult] = []

    try:
        with Progress(
            SpinnerColumn(spinner_name="dots"),
            TextColumn("[info]{task.description}"),
            BarColumn(bar_width=40),
            TextColumn("[dim]{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task(description="Starting...", total=1.0)
            async for item in pipeline.stream_batch(inputs):
                if isinstance(item, ProgressEvent):
                    progress.update(task, completed=item.progress, description=item.message)
                    continue
                results.append(item)
                style = STATUS_STYLES.get(item.status, "dim")
                progress.console.print(f"[{style}]{item.status}:[/] {item.source_url}")
    except ConfigurationError as e:
        console.print(f"[error]{e}[/]")
        return 1

    if not results:
        console.print("[warning]No links to process.[/]")
        return 1

    render_results(results)

    if output is not None:
        path = write_results_json(results, output)
        console.print(f"\n[success]Results written to {path}[/]")

    return 0 if all(r.status == PodcastStatus.SUCCESS for r in results) else 1


async def report_cmd(
    input_path: Path,
    prompt: str,
    output: Path | None = None,
    provider: str | None = None,
) -> int:
    """Write an LLM report on the transcripts in a results JSON file.

    Returns:
        Process exit code: 0 once the report is written, 1 otherwise.
    """
    try:
        results = read_results_json(input_path)
    except (OSError, ValueError) as e:
        console.print(f"[error]Could not read {input_path}: {e}[/]")
        return 1

    config = PodscribeConfig()
    if provider:
        config = config.model_copy(update={"report_provider": provider})

    try:
        generator = create_report_generator(config, RetryConfig.from_config(config))
        with console.status("[info]Analyzing with LLM...[/]"):
            body = await generate_report(results, prompt, generator)
    except (ConfigurationError, ProviderError, ValueError) as e:
        console.print(f"[error]{e}[/]")
        return 1

    markdown = render_report_markdown(body, results)
    if output is None:
        console.print(markdown, markup=False, highlight=False)
    else:
        path = write_report(markdown, output)
        console.print(f"[success]Report written to {path}[/]")
    return 0


async def doctor_cmd() -> None:
    """Report whether the external tools are available; exits 0 or 1."""
    result = check_dependencies(PodscribeConfig())

    table = Table(box=None, show_header=True, header_style="highlight", pad_edge=False)
    table.add_column("Dependency")
    table.add_column("Status")
    table.add_column("Location", style="dim")
    for check in result.checks:
        status = "[success]found[/]" if check.available else "[error]missing[/]"
        table.add_row(check.name, status, check.path or "-")
    console.print(table)

    sys.exit(0 if result.all_ok else 1)


def main() -> None:
    """Entry point with clean help documentation."""
    parser = argparse.ArgumentParser(
        description="podscribe: podcast links in, transcripts out",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  podscribe setup
  podscribe extract "https://youtu.be/..." "https://podcasts.apple.com/..."
  podscribe extract --file links.txt --output results.json
  podscribe report --input results.json --prompt "Compare the guests' views" --output report.md
  podscribe doctor

Note: Use "podscribe [command] --help" for more details on a specific command.
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Setup
    subparsers.add_parser("setup", help="Choose a transcription provider and store its key")

    # Extract
    extract_parser = subparsers.add_parser(
        "extract",
        help="Download and transcribe podcast episodes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Note: Always wrap URLs in quotes to prevent shell errors.

Examples:
  podscribe extract "https://www.youtube.com/watch?v=..."
  podscribe extract "https://open.spotify.com/episode/..."
  podscribe extract --file links.txt --provider openai
        """,
    )
    extract_parser.add_argument("urls", nargs="*", help="Episode links to transcribe")
    extract_parser.add_argument(
        "--file", type=Path, default=None, help="Text file with one link per line"
    )
    extract_parser.add_argument(
        "--provider",
        choices=list(PROVIDER_LABELS),
        default=None,
        help="Transcription provider (overrides PODSCRIBE_TRANSCRIPTION_PROVIDER)",
    )
    extract_parser.add_argument(
        "--output", type=Path, default=None, help="Write results to this JSON file"
    )

    # Report
    report_parser = subparsers.add_parser(
        "report",
        help="Write an LLM report on transcripts saved with extract --output",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
The report is Markdown with ## section headers; convert it to PDF or any
other layout with an external tool.

Examples:
  podscribe report --input results.json --prompt "Summarize the key themes"
  podscribe report --input results.json --prompt "..." --provider anthropic --output report.md
        """,
    )
    report_parser.add_argument(
        "--input", type=Path, required=True, help="Results JSON written by extract --output"
    )
    report_parser.add_argument("--prompt", required=True, help="What the report should cover")
    report_parser.add_argument(
        "--provider",
        choices=list(REPORT_PROVIDER_LABELS),
        default=None,
        help="LLM provider (overrides PODSCRIBE_REPORT_PROVIDER)",
    )
    report_parser.add_argument(
        "--output", type=Path, default=None, help="Write the report here instead of stdout"
    )

    # Doctor
    subparsers.add_parser("doctor", help="Check that ffmpeg, ffprobe and yt-dlp are available")

    args = parser.parse_args()

    try:
        if args.command == "setup":
            asyncio.run(setup_cmd())
        elif args.command == "extract":
            if not args.urls and args.file is None:
                extract_parser.error("give at least one URL or --file")
            code = asyncio.run(extract_cmd(args.urls, args.file, args.provider, args.output))
            sys.exit(code)
        elif args.command == "report":
            code = asyncio.run(report_cmd(args.input, args.prompt, args.output, args.provider))
            sys.exit(code)
        elif args.command == "doctor":
            asyncio.run(doctor_cmd())
        else:
            parser.print_help()
    except KeyboardInterrupt:
        console.print("\n[warning]Operation cancelled by user.[/]")
        sys.exit(0)


if __name__ == "__main__":
    main()
