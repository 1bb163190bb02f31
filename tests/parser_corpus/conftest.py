"""Pytest configuration for parser corpus tests."""

from pathlib import Path

import pytest

# Corpus directories
CORPORA_DIR = Path(__file__).parent.parent / "corpora"
BLUEPRINT_CORPUS_DIR = CORPORA_DIR / "blueprint"


@pytest.fixture
def blueprint_corpus_dir() -> Path:
    """Return path to the BluePrint corpus directory."""
    return BLUEPRINT_CORPUS_DIR
