"""Unit tests for flat segmentation and strategy selection."""
import pytest

from booksum.config import SegmentationSettings
from booksum.segmentation import FlatStrategy, Segmenter


def test_sentence_free_text_splits_into_bounded_sections():
    """Test 500 words with no terminator under a small cap."""
    words = [f"word{i}" for i in range(500)]
    text = " ".join(words)
    cap = 300
    assert len(text) > cap

    settings = SegmentationSettings(
        strategy="flat", flat_chunk_character_size=cap, sentence_group_size=4
    )
    chunks = Segmenter(settings).segment(text)

    assert len(chunks) > 1
    assert [c.name for c in chunks] == [f"Section {n}" for n in range(1, len(chunks) + 1)]
    assert all(len(c.content) <= cap for c in chunks)
    assert " ".join(c.content for c in chunks).split() == words


def test_flat_ignores_markers():
    """Test flat strategy never produces Chapter names."""
    settings = SegmentationSettings(strategy="flat")
    chunks = Segmenter(settings).segment("Chapter 1. Hello world. Chapter 2. Goodbye world.")

    assert [c.name for c in chunks] == ["Section 1"]
    assert chunks[0].content == "Chapter 1. Hello world. Chapter 2. Goodbye world."


def test_flat_uses_its_own_cap():
    """Test flat and structural caps are independent."""
    text = " ".join(f"Sentence {i} is short." for i in range(100))
    settings = SegmentationSettings(
        strategy="flat",
        max_chunk_character_size=100_000,
        flat_chunk_character_size=200,
    )
    chunks = Segmenter(settings).segment(text)

    assert len(chunks) > 1
    assert all(len(c.content) <= 200 for c in chunks)


def test_flat_strategy_direct():
    strategy = FlatStrategy(max_chunk_size=25, group_size=2)
    chunks = strategy.split("One two. Three four. Five six. Seven.")

    assert [c.content for c in chunks] == ["One two. Three four.", "Five six. Seven."]
    assert [c.name for c in chunks] == ["Section 1", "Section 2"]


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Chapter 1. Something happens.", "structural"),
        ("Nothing marks this text.", "flat"),
    ],
)
def test_auto_strategy_selection(text, expected):
    segmenter = Segmenter(SegmentationSettings(strategy="auto"))
    assert segmenter.strategy_for(text).name == expected


def test_structural_is_default():
    segmenter = Segmenter()
    assert segmenter.strategy_for("Nothing marks this text.").name == "structural"
    assert segmenter.segment("Nothing marks this text.")[0].name == "Section 1.1"
