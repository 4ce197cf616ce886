"""Command-line entry point for the meeting summarizer."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from meeting_summarizer.core import AppSettings, configure_logging, load_app_settings
from meeting_summarizer.core.errors import SummarizerError
from meeting_summarizer.ingestion import TranscriptSource
from meeting_summarizer.intelligence import SummarizationService, build_llm_client
from meeting_summarizer.session import SessionController
from meeting_summarizer.transport import build_delivery_client

DEFAULT_SUBJECT = "Meeting Summary"
DEFAULT_MESSAGE = "Please find the meeting summary below:"


def build_parser() -> argparse.ArgumentParser:
    """Create and configure the CLI argument parser."""
    parser = argparse.ArgumentParser(description="AI meeting transcript summarizer")
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to a .env file containing configuration overrides.",
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("info", help="Show provider and delivery configuration.")

    summarize = subparsers.add_parser(
        "summarize", help="Summarize a transcript file and optionally email it."
    )
    summarize.add_argument("transcript", type=Path, help="Plain-text transcript.")
    summarize.add_argument(
        "--prompt",
        default=None,
        help="Custom summary instructions (default: key points, decisions, actions).",
    )
    summarize.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the summary to this file instead of printing it.",
    )
    summarize.add_argument(
        "--share-to",
        dest="share_to",
        nargs="+",
        default=None,
        metavar="ADDRESS",
        help="Email the summary to these recipients.",
    )
    summarize.add_argument("--subject", default=DEFAULT_SUBJECT)
    summarize.add_argument("--message", default=DEFAULT_MESSAGE)
    return parser


def build_controller(settings: AppSettings) -> SessionController:
    """Create a session controller from configuration."""
    summarizer = SummarizationService(build_llm_client(settings.llm))
    return SessionController(summarizer, build_delivery_client(settings.smtp))


def execute(
    args: argparse.Namespace,
    settings: AppSettings,
    controller: SessionController | None = None,
) -> int:
    """Execute the requested CLI command and return the exit status."""
    command = args.command or "info"
    if command == "info":
        delivery = build_delivery_client(settings.smtp)
        print("AI Meeting Summarizer is ready.")
        print(f"LLM provider: {settings.llm.provider} ({settings.llm.model})")
        print(f"LLM endpoint: {settings.llm.base_url}")
        print(f"Email delivery: {delivery.mode.value}")
        return 0

    session = controller or build_controller(settings)
    try:
        _run_summarize(session, args)
    except SummarizerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_app_settings(env_file=args.env_file)
    configure_logging(settings.logging)
    return execute(args, settings)


def _run_summarize(controller: SessionController, args: argparse.Namespace) -> None:
    """Load, summarize, and optionally share a transcript file."""
    transcript = TranscriptSource().load_path(args.transcript)
    controller.load_text(transcript.text, source_name=transcript.source_name)
    summary = controller.generate(args.prompt)

    if args.output is not None:
        args.output.write_text(summary.current_text, encoding="utf-8")
        print(f"Summary written to {args.output} ({summary.word_count} words)")
    else:
        print(summary.current_text)

    if not args.share_to:
        return

    result = controller.share(args.share_to, args.subject, args.message)
    print(result.message)
    if result.preview is not None:
        print()
        print(f"To: {', '.join(result.preview.to)}")
        print(f"Subject: {result.preview.subject}")
        print()
        print(result.preview.text_body)


if __name__ == "__main__":
    sys.exit(main())
