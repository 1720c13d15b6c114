
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from milestone_search.config.settings import settings
from milestone_search.container import configure_container, container
from milestone_search.core.errors import SearchError
from milestone_search.core.models.chat import ChatMessage
from milestone_search.core.models.content import SourceType
from milestone_search.core.models.search import (
    ConversationSearchQuery,
    SearchConfigOptions,
    SearchOptions,
)
from milestone_search.core.protocols.content_store import ContentStoreProtocol
from milestone_search.core.services.ai_search_service import AISearchService

logger = logging.getLogger(__name__)


async def cmd_init_config(service: AISearchService, args: argparse.Namespace) -> None:
    """Init-config command - create a project's search config."""
    config_id = await service.initialize_search_config(
        args.project,
        SearchConfigOptions(
            embedding_model=args.model,
            chunk_size=args.chunk_size,
            chunk_overlap=args.chunk_overlap,
        ),
    )
    print(config_id)


async def cmd_index(service: AISearchService, args: argparse.Namespace) -> None:
    """Index command - (re)index a plain text file as one source."""
    content = Path(args.file).read_text(encoding="utf-8")
    result = await service.update_content(
        args.source_type, args.source_id, args.project, content
    )
    logger.info(f"Indexed {len(result.chunks)} chunks")


async def cmd_search(service: AISearchService, args: argparse.Namespace) -> None:
    """Search command - vector or hybrid search."""
    if args.hybrid:
        results = await service.hybrid_search(
            args.query, args.project, args.source_types, args.threshold, args.count
        )
    else:
        results = await service.search_content(
            args.query, args.project, args.source_types, args.threshold, args.count
        )

    for r in results:
        print(f"{r.similarity:.3f}\t{r.source_type}:{r.source_id}#{r.chunk_index}\t{r.text[:80]}")


async def cmd_ask(service: AISearchService, args: argparse.Namespace) -> None:
    """Ask command - conversation-aware topic search."""
    history = []
    if args.history:
        data = json.loads(Path(args.history).read_text(encoding="utf-8"))
        history = [ChatMessage.from_dict(m) for m in data]

    results = await service.search_with_conversation_context(
        ConversationSearchQuery(
            topic_description=args.topic,
            project_id=args.project,
            conversation_history=history,
            source_types=args.source_types,
            options=SearchOptions(match_threshold=args.threshold, match_count=args.count),
        )
    )

    for r in results:
        print(f"{r.relevance_score:.3f}\t{r.source_type}:{r.source_id}#{r.chunk_index}\t{r.text[:80]}")
    if results:
        for question in results[0].suggested_questions:
            print(f"? {question}")


async def cmd_similar(service: AISearchService, args: argparse.Namespace) -> None:
    """Similar command - records whose full text resembles the query."""
    results = await service.search_similar_records(
        args.query, args.project, args.exclude, args.threshold, args.count
    )

    for r in results:
        print(f"{r.similarity:.3f}\t{r.record_id}\t{r.content[:80]}")


COMMANDS = {
    "init-config": cmd_init_config,
    "index": cmd_index,
    "search": cmd_search,
    "ask": cmd_ask,
    "similar": cmd_similar,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="milestone-search")
    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init-config", help="Create a project's search config")
    init.add_argument("project")
    init.add_argument("--model")
    init.add_argument("--chunk-size", type=int)
    init.add_argument("--chunk-overlap", type=int)

    index = sub.add_parser("index", help="Index a text file")
    index.add_argument("project")
    index.add_argument("source_id")
    index.add_argument("file")
    index.add_argument(
        "--source-type",
        choices=[t.value for t in SourceType],
        default=SourceType.RECORD.value,
    )

    for name, positional in (("search", "query"), ("ask", "topic")):
        cmd = sub.add_parser(name)
        cmd.add_argument("project")
        cmd.add_argument(positional)
        cmd.add_argument(
            "--source-type",
            dest="source_types",
            action="append",
            choices=[t.value for t in SourceType],
        )
        cmd.add_argument("--threshold", type=float, default=settings.search_match_threshold)
        cmd.add_argument("--count", type=int, default=settings.search_match_count)

    sub.choices["search"].add_argument("--hybrid", action="store_true")
    sub.choices["ask"].add_argument("--history", help="JSON file of {role, content}")

    similar = sub.add_parser("similar", help="Find similar records")
    similar.add_argument("project")
    similar.add_argument("query")
    similar.add_argument("--exclude", help="Record ID to leave out")
    similar.add_argument("--threshold", type=float, default=settings.similar_records_threshold)
    similar.add_argument("--count", type=int, default=settings.similar_records_count)

    return parser


async def run(args: argparse.Namespace) -> int:
    configure_container(settings)
    service = container.resolve(AISearchService)
    store = container.resolve(ContentStoreProtocol)

    try:
        await COMMANDS[args.command](service, args)
    except SearchError as e:
        logger.error(str(e))
        return 1
    finally:
        if hasattr(store, "aclose"):
            await store.aclose()
    return 0


def main():
    """CLI entry point."""
    logging.basicConfig(level=settings.log_level, format="%(message)s")
    args = build_parser().parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
