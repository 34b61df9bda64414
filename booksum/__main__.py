"""
Command-line entry point.

Usage:
    python -m booksum chunk book.txt [--strategy flat] [--id my-book] [--output-dir ./data]
    python -m booksum summarize book.txt [--id my-book] [--output-dir ./data]

``summarize`` needs OPENAI_API_KEY (and optionally GENERATION__API_BASE,
GENERATION__MODEL) in the environment or a .env file.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import TypeAdapter

from .config import BookSumSettings, configure_logging, get_settings
from .errors import BookSumError
from .models import Chunk
from .pipeline import chunk_stage, load_text, run_pipeline
from .storage import LocalResultStore
from .summarization import OpenAICompatibleClient


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="booksum", description="Segment and summarize long text documents"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    chunk = sub.add_parser("chunk", help="Split a document into chunks and print them as JSON")
    chunk.add_argument("path", type=Path)
    chunk.add_argument("--id", dest="document_id", help="Document id (defaults to file stem)")
    chunk.add_argument(
        "--strategy",
        choices=["structural", "flat", "auto"],
        help="Override the configured segmentation strategy",
    )
    chunk.add_argument(
        "--output-dir",
        type=Path,
        help="Also store the chunk list under this directory and print its URI",
    )

    summarize = sub.add_parser("summarize", help="Chunk and summarize a document")
    summarize.add_argument("path", type=Path)
    summarize.add_argument("--id", dest="document_id", help="Document id (defaults to file stem)")
    summarize.add_argument(
        "--strategy",
        choices=["structural", "flat", "auto"],
        help="Override the configured segmentation strategy",
    )
    summarize.add_argument(
        "--output-dir",
        type=Path,
        help="Store the result under this directory and print its URI",
    )
    return parser


def _with_strategy(settings: BookSumSettings, strategy: Optional[str]) -> BookSumSettings:
    if not strategy:
        return settings
    segmentation = settings.segmentation.model_copy(update={"strategy": strategy})
    return settings.model_copy(update={"segmentation": segmentation})


def _run(args: argparse.Namespace, settings: BookSumSettings) -> None:
    document_id = args.document_id or args.path.stem
    text = load_text(args.path)

    if args.command == "chunk":
        chunks = chunk_stage(document_id, text, settings)
        print(TypeAdapter(List[Chunk]).dump_json(chunks, by_alias=True, indent=2).decode())
        if args.output_dir:
            uri = LocalResultStore(args.output_dir).save_chunks(document_id, chunks)
            print(json.dumps({"chunksUrl": uri}), file=sys.stderr)
        return

    client = OpenAICompatibleClient.from_settings(settings.generation)
    store = LocalResultStore(args.output_dir) if args.output_dir else None
    result = asyncio.run(run_pipeline(document_id, text, client, settings, store=store))
    print(result.to_json())
    if store is not None:
        print(json.dumps({"outputUrl": store.get_output_url(document_id)}), file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = _with_strategy(get_settings(), args.strategy)
    configure_logging(settings)

    try:
        _run(args, settings)
    except BookSumError as e:
        print(f"error [{e.code}]: {e}", file=sys.stderr)
        return 1
    except FileNotFoundError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
