#!/usr/bin/env python3
"""
CLI Interface for the learning history.

Run with: python -m knowledge_decay.cli

or if installed: knowledge-decay
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from knowledge_decay.api.tracker import LearningTracker
from knowledge_decay.config import KnowledgeDecayConfig
from knowledge_decay.history.store import ImportFormatError
from knowledge_decay.models.entry import ImportMode, MemoryBucket, now_ms
from knowledge_decay.review.classifier import ScoredEntry
from knowledge_decay.storage.base import StorageError


def format_time_ago(learned_at: int, now: int | None = None) -> str:
    """Human-readable age of a timestamp (ms)."""
    if now is None:
        now = now_ms()
    seconds = (now - learned_at) // 1000

    if seconds < 60:
        return "Just now"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    return f"{seconds // 86400}d ago"


def truncate(text: str, max_length: int) -> str:
    if not text:
        return ""
    return text[:max_length] + "..." if len(text) > max_length else text


def format_entry(item: ScoredEntry, now: int, indent: str = "") -> str:
    entry = item.entry
    lines = [
        f"{indent}[{round(item.score):>3}%] {truncate(entry.title, 60)}  ({item.bucket.value})",
        f"{indent}      id={entry.id}  complexity={entry.complexity}/5  "
        f"domain={entry.domain}  {format_time_ago(entry.learned_at, now)}",
        f"{indent}      concepts: {', '.join(entry.concepts)}",
    ]
    for sub in item.subtopics:
        lines.append(format_entry(sub, now, indent + "    "))
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="knowledge-decay",
        description="Track what you learned and what is fading",
    )
    parser.add_argument("--config", type=Path, help="Path to a JSON config file")
    parser.add_argument("--db", type=Path, help="Override the SQLite database path")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    commands = parser.add_subparsers(dest="command", required=True)

    list_cmd = commands.add_parser("list", help="Show learned topics with retention")
    list_cmd.add_argument(
        "--filter",
        choices=["all"] + [bucket.value for bucket in MemoryBucket],
        default="all",
    )

    commands.add_parser("stats", help="Show history statistics")

    remember_cmd = commands.add_parser("remember", help="Reset a topic to full strength")
    remember_cmd.add_argument("entry_id")

    forget_cmd = commands.add_parser("forget", help="Delete a topic")
    forget_cmd.add_argument("entry_id")

    clear_cmd = commands.add_parser("clear", help="Delete the whole history")
    clear_cmd.add_argument("--yes", action="store_true", help="Confirm clearing all data")

    export_cmd = commands.add_parser("export", help="Export history to a JSON file")
    export_cmd.add_argument("path", type=Path)

    import_cmd = commands.add_parser("import", help="Import history from a JSON file")
    import_cmd.add_argument("path", type=Path)
    import_cmd.add_argument(
        "--merge",
        action="store_true",
        help="Merge with the current history instead of replacing it",
    )

    return parser


def load_config(args: argparse.Namespace) -> KnowledgeDecayConfig:
    config = KnowledgeDecayConfig.from_file(args.config) if args.config else KnowledgeDecayConfig()
    if args.db:
        config.storage.sqlite_path = args.db
    if args.debug:
        config.debug = True
    # The CLI never captures, so it has no use for the LLM
    config.llm.provider = "none"
    return config


async def run(args: argparse.Namespace, config: KnowledgeDecayConfig) -> int:
    async with LearningTracker(config) as tracker:
        if args.command == "list":
            now = now_ms()
            view = await tracker.dashboard(args.filter, now)
            if not view.entries:
                print("No learning sessions tracked yet.")
            for item in view.entries:
                print(format_entry(item, now))
            return 0

        if args.command == "stats":
            stats = (await tracker.dashboard()).stats
            print(f"Topics learned: {stats.total}")
            print(f"Needs review:   {stats.needs_review}")
            print(f"Avg memory:     {round(stats.average_score)}%")
            return 0

        if args.command == "remember":
            if not await tracker.remember(args.entry_id):
                print(f"No entry with id {args.entry_id}")
                return 1
            print("Memory restored to 100%")
            return 0

        if args.command == "forget":
            if not await tracker.forget(args.entry_id):
                print(f"No entry with id {args.entry_id}")
                return 1
            print("Entry deleted")
            return 0

        if args.command == "clear":
            if not args.yes:
                print("Refusing to clear all learning data without --yes")
                return 1
            await tracker.clear()
            print("All learning data cleared")
            return 0

        if args.command == "export":
            snapshot = await tracker.export_to_file(args.path)
            print(f"Exported {snapshot.total_topics} topics to {args.path}")
            return 0

        if args.command == "import":
            mode = ImportMode.MERGE if args.merge else ImportMode.REPLACE
            try:
                history = await tracker.import_from_file(args.path, mode)
            except ImportFormatError as e:
                print(f"Import failed: {e}")
                return 1
            print(f"Imported successfully, {len(history)} topics stored")
            return 0

    return 1


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    config = load_config(args)

    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        return asyncio.run(run(args, config))
    except StorageError as e:
        logging.exception("Storage error")
        print(f"Storage error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
