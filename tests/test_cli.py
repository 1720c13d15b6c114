"""Tests for CLI argument parsing."""

from milestone_search.presentation.cli import COMMANDS, build_parser


def test_commands():
    assert set(COMMANDS) == {"init-config", "index", "search", "ask", "similar"}


def test_search_arguments():
    args = build_parser().parse_args(
        ["search", "p1", "backup policy", "--hybrid", "--source-type", "file",
         "--source-type", "website", "--threshold", "0.4"]
    )

    assert args.command == "search"
    assert args.query == "backup policy"
    assert args.hybrid is True
    assert args.source_types == ["file", "website"]
    assert args.threshold == 0.4
    assert args.count == 10


def test_index_defaults_to_record():
    args = build_parser().parse_args(["index", "p1", "r1", "notes.txt"])

    assert args.source_type == "record"


def test_similar_defaults():
    args = build_parser().parse_args(["similar", "p1", "some text", "--exclude", "r1"])

    assert args.exclude == "r1"
    assert args.threshold == 0.8
    assert args.count == 5
