"""Command-line interface for Timetable Extractor.

This module provides the main entry point for the CLI application.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

import structlog

from timetable_extractor import __version__
from timetable_extractor.config import get_settings
from timetable_extractor.documents import detect_input_kind, extract_document_text, guess_mime_type
from timetable_extractor.exceptions import TimetableExtractorError
from timetable_extractor.extraction.normalizer import normalize_extraction
from timetable_extractor.extraction.parsing import parse_response
from timetable_extractor.extraction.prompt import build_image_prompt, build_text_prompt
from timetable_extractor.models import ExtractionResult, sort_timeblocks

logger = structlog.get_logger()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="timetable-extractor", description="Timetable Extractor")
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract_parser = subparsers.add_parser(
        "extract",
        help="Extract timeblocks from a timetable document using an LLM backend",
    )
    extract_parser.add_argument("file", type=Path, help="Timetable document (PDF, DOCX, PNG, JPEG, WEBP, TXT)")
    extract_parser.add_argument(
        "--provider",
        default=None,
        help="Extraction backend (default: settings default_provider)",
    )
    extract_parser.add_argument(
        "--vision",
        action="store_true",
        help="Send PDFs to the backend as-is instead of extracting their text first",
    )
    _add_output_arguments(extract_parser)

    normalize_parser = subparsers.add_parser(
        "normalize",
        help="Parse and normalize a saved backend reply without calling a backend",
    )
    normalize_parser.add_argument("response", type=Path, help="File containing the raw backend reply")
    normalize_parser.add_argument(
        "--allow-reversed",
        action="store_true",
        help="Keep timeblocks whose end time is not after their start time",
    )
    _add_output_arguments(normalize_parser)

    prompt_parser = subparsers.add_parser("prompt", help="Print the prompt that would be sent to the backend")
    prompt_parser.add_argument(
        "file",
        type=Path,
        nargs="?",
        default=None,
        help="Document to embed (text mode). Without a file, prints the image-mode prompt.",
    )

    subparsers.add_parser("providers", help="List configured extraction backends")

    return parser


def _add_output_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--sort", action="store_true", help="Sort timeblocks by day and start time")
    parser.add_argument("--output", type=Path, default=None, help="Write JSON here instead of stdout")


def _emit(result: ExtractionResult, args: argparse.Namespace) -> int:
    if args.sort:
        result = result.model_copy(update={"timeblocks": sort_timeblocks(result.timeblocks)})

    text = json.dumps(result.to_payload(), indent=2, ensure_ascii=False)
    if args.output is not None:
        args.output.write_text(text + "\n", encoding="utf-8")
    else:
        print(text)

    if result.rejections:
        print(
            f"{len(result.rejections)} of {result.candidate_count} candidates rejected",
            file=sys.stderr,
        )
        for r in result.rejections:
            print(f"  #{r.index} {r.reason}: {r.detail or ''}", file=sys.stderr)
    return 0


async def _cmd_extract(args: argparse.Namespace) -> int:
    from timetable_extractor.backends import build_extractor
    from timetable_extractor.service import TimetableExtractionService

    settings = get_settings()
    service = TimetableExtractionService(build_extractor(args.provider, settings), settings)

    data = args.file.read_bytes()
    result = await service.extract_from_document(
        data,
        mime_type=guess_mime_type(args.file),
        filename=args.file.name,
        prefer_vision=args.vision,
    )
    return _emit(result, args)


def _cmd_normalize(args: argparse.Namespace) -> int:
    raw = args.response.read_text(encoding="utf-8")
    enforce = get_settings().enforce_time_order and not args.allow_reversed
    result = normalize_extraction(parse_response(raw), enforce_time_order=enforce)
    return _emit(result, args)


def _cmd_prompt(args: argparse.Namespace) -> int:
    settings = get_settings()
    if args.file is None:
        print(build_image_prompt())
        return 0

    kind = detect_input_kind(guess_mime_type(args.file), args.file.name)
    text = extract_document_text(args.file.read_bytes(), kind)
    print(build_text_prompt(text, max_chars=settings.max_prompt_chars))
    return 0


def _cmd_providers() -> int:
    from timetable_extractor.backends import available_providers

    settings = get_settings()
    providers = available_providers(settings)
    if not providers:
        print("No providers configured. Set TIMETABLE_OLLAMA_HOST or TIMETABLE_GEMINI_API_KEY.")
        return 0

    for p in providers:
        default = " (default)" if p.name == settings.default_provider else ""
        vision = "vision" if p.supports_images else "text-only"
        print(f"{p.name}\t{p.model}\t{vision}{default}")
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point for the Timetable Extractor CLI.

    Args:
        args: Command-line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, 1 for extraction failures, 2 for usage errors).
    """
    if args is None:
        args = sys.argv[1:]

    settings = get_settings()

    # Configure logging; stdout is reserved for JSON output.
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level.upper(), logging.INFO)
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )

    logger.info("timetable_extractor_started", version=__version__, debug=settings.debug)

    parser = _build_parser()
    parsed = parser.parse_args(args)

    try:
        if parsed.command == "extract":
            return asyncio.run(_cmd_extract(parsed))
        if parsed.command == "normalize":
            return _cmd_normalize(parsed)
        if parsed.command == "prompt":
            return _cmd_prompt(parsed)
        if parsed.command == "providers":
            return _cmd_providers()
    except TimetableExtractorError as exc:
        logger.error("timetable_extraction_failed", error_type=type(exc).__name__, error=str(exc))
        print(f"error: {type(exc).__name__}: {exc}", file=sys.stderr)
        return 1

    logger.error("unknown_command", command=parsed.command)
    return 2


if __name__ == "__main__":
    sys.exit(main())
