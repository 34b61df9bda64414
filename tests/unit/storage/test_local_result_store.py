"""Unit tests for LocalResultStore."""
import json

import pytest

from booksum.models import Chunk, ChunkSummary, FinalResult, OverarchingSummary
from booksum.storage import LocalResultStore, sanitize_filename


@pytest.fixture
def store(tmp_path):
    return LocalResultStore(tmp_path / "results")


@pytest.fixture
def chunks():
    return [
        Chunk(name="Prefix 1.1", content="A foreword."),
        Chunk(name="Chapter 1.1", content="Chapter one. It begins."),
    ]


@pytest.fixture
def result():
    return FinalResult(
        id="book/1",
        sections=[ChunkSummary(chunk_name="Chapter 1.1", summary="It begins.")],
        overarching_summary=OverarchingSummary(themes=["origins"], synopsis="A start."),
    )


def test_save_and_load_chunks(store, chunks):
    uri = store.save_chunks("book-1", chunks)

    path = store.path_for(uri)
    assert path.parent == store.root_dir / "chunks"
    assert path.name.startswith("book-1_")
    assert store.load_chunks(uri) == chunks

    stored = json.loads(path.read_text())
    assert stored[0] == {"chunkName": "Prefix 1.1", "chunkContent": "A foreword."}


def test_each_chunk_save_gets_a_new_file(store, chunks):
    assert store.save_chunks("book-1", chunks) != store.save_chunks("book-1", chunks)


def test_save_final_result(store, result):
    uri = store.save_final_result(result)

    path = store.path_for(uri)
    assert path == store.root_dir / "summaries" / "book_1_final_summary.json"
    assert store.load_final_result(uri) == result
    assert "overarchingSummary" in json.loads(path.read_text())


def test_save_chunk_output(store, chunks):
    uri = store.save_chunk_output("book-1", chunks)
    assert store.path_for(uri) == store.root_dir / "summaries" / "book-1.json"


def test_output_url_index(store):
    assert store.get_output_url("book-1") is None

    store.record_output_url("book-1", "file:///tmp/a.json")
    store.record_output_url("book-2", "file:///tmp/b.json")
    store.record_output_url("book-1", "file:///tmp/c.json")

    assert store.get_output_url("book-1") == "file:///tmp/c.json"
    assert store.get_output_url("book-2") == "file:///tmp/b.json"


def test_base_url(tmp_path, chunks):
    store = LocalResultStore(tmp_path, base_url="http://localhost:8080/files/")

    uri = store.save_chunk_output("book-1", chunks)

    assert uri == "http://localhost:8080/files/summaries/book-1.json"
    assert store.path_for(uri) == tmp_path.resolve() / "summaries" / "book-1.json"


def test_relative_paths_resolve_under_root(store, chunks):
    store.save_chunk_output("book-1", chunks)
    assert store.path_for("summaries/book-1.json").exists()


@pytest.mark.parametrize("uri", ["../outside.json", "file:///etc/passwd"])
def test_paths_outside_root_rejected(store, uri):
    with pytest.raises(ValueError):
        store.path_for(uri)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("book-1", "book-1"),
        ("my book.txt", "my_book.txt"),
        ("../../etc", "_.._etc"),
        ("...", "document"),
        ("", "document"),
    ],
)
def test_sanitize_filename(name, expected):
    assert sanitize_filename(name) == expected


def test_sanitize_filename_truncates():
    assert len(sanitize_filename("a" * 500)) == 200
