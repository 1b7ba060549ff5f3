"""Command-line interface for one-off indexing and local previews.

Usage::

    python -m sharepoint_indexer.cli index "https://contoso.sharepoint.com/sites/Eng/Shared%20Documents/plan.docx"

    python -m sharepoint_indexer.cli queue < messages.txt

    python -m sharepoint_indexer.cli parse "https://contoso.sharepoint.com/sites/Eng/Shared%20Documents/plan.docx"

    python -m sharepoint_indexer.cli chunk --file ./plan.docx

``index`` and ``queue`` need the full configuration (Graph, embeddings,
search index); ``parse`` and ``chunk`` work offline.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from sharepoint_indexer.config.loader import load_config
from sharepoint_indexer.config.settings import Settings
from sharepoint_indexer.services.chunker import SentenceChunker
from sharepoint_indexer.services.extraction import TextExtractor
from sharepoint_indexer.services.locator import parse_reference
from sharepoint_indexer.utils.errors import IndexerError
from sharepoint_indexer.utils.logging import configure_logging


async def _handle_index(args: argparse.Namespace, app_settings: Settings) -> int:
    """Index one document through the full pipeline."""
    from sharepoint_indexer.pipeline.factory import build_components

    components = await build_components(app_settings, load_config(settings=app_settings))
    try:
        result = await components["pipeline"].run(args.url)
    finally:
        await components["http_client"].aclose()

    print(result.message)
    print(f"  Stale chunks removed: {result.deleted_count}")
    print(f"  Time:                 {result.elapsed_seconds:.2f}s")
    return 0


async def _handle_queue(args: argparse.Namespace, app_settings: Settings) -> int:
    """Process queue messages read one per line from a file or stdin."""
    from sharepoint_indexer.pipeline.factory import build_components
    from sharepoint_indexer.worker.queue_handler import QueueHandler

    source = Path(args.file).read_text(encoding="utf-8") if args.file else sys.stdin.read()
    messages = [line for line in source.splitlines() if line.strip()]
    if not messages:
        print("No queue messages to process.", file=sys.stderr)
        return 1

    components = await build_components(app_settings, load_config(settings=app_settings))
    handler = QueueHandler(components["pipeline"])
    failures = 0
    try:
        for message in messages:
            try:
                result = await handler.handle(message)
            except IndexerError as exc:
                failures += 1
                print(f"FAILED  {message}: {exc}", file=sys.stderr)
                continue
            print(f"OK      {result.message}")
    finally:
        await components["http_client"].aclose()

    print(f"\nProcessed {len(messages) - failures}/{len(messages)} messages")
    return 1 if failures else 0


def _handle_parse(args: argparse.Namespace) -> int:
    """Show how a URL decomposes into site and file coordinates."""
    reference = parse_reference(args.url)
    print(f"Tenant:    {reference.tenant}")
    print(f"Site path: {reference.container_path}")
    print(f"File path: {reference.relative_file_path}")
    return 0


async def _handle_chunk(args: argparse.Namespace, app_settings: Settings) -> int:
    """Extract and chunk a local file without touching any service."""
    path = Path(args.file)
    text = await TextExtractor().extract(path.suffix, path.read_bytes())
    chunker = SentenceChunker(max_chunk_size=args.max_chunk_size or app_settings.max_chunk_size)
    chunks = chunker.chunk(text)

    print(f"File:       {path.name}")
    print(f"Characters: {len(text)}")
    print(f"Chunks:     {len(chunks)}")
    for position, chunk in enumerate(chunks, start=1):
        preview = chunk[:70].replace("\n", " ")
        print(f"  {position:>3}  {len(chunk):>5} chars  {preview}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the indexer CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m sharepoint_indexer.cli",
        description="Index SharePoint documents into the search index.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Indexer commands")

    # -- index --
    index_parser = subparsers.add_parser("index", help="Index one SharePoint file")
    index_parser.add_argument("url", help="Absolute SharePoint file URL")

    # -- queue --
    queue_parser = subparsers.add_parser(
        "queue", help="Process queue messages, one per line (stdin by default)"
    )
    queue_parser.add_argument("--file", help="Read messages from this file instead of stdin")

    # -- parse --
    parse_parser = subparsers.add_parser("parse", help="Decompose a SharePoint file URL")
    parse_parser.add_argument("url", help="Absolute SharePoint file URL")

    # -- chunk --
    chunk_parser = subparsers.add_parser("chunk", help="Extract and chunk a local file")
    chunk_parser.add_argument("--file", required=True, help="Path to the file")
    chunk_parser.add_argument(
        "--max-chunk-size",
        type=int,
        dest="max_chunk_size",
        default=0,
        help="Override MAX_CHUNK_SIZE",
    )

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: parse the subcommand and dispatch to its handler."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    app_settings = Settings()
    configure_logging(log_level=app_settings.log_level)

    try:
        if args.command == "index":
            exit_code = asyncio.run(_handle_index(args, app_settings))
        elif args.command == "queue":
            exit_code = asyncio.run(_handle_queue(args, app_settings))
        elif args.command == "parse":
            exit_code = _handle_parse(args)
        elif args.command == "chunk":
            exit_code = asyncio.run(_handle_chunk(args, app_settings))
        else:
            parser.print_help()
            exit_code = 1
    except IndexerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
