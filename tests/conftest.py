"""Pytest configuration and fixtures."""

import os

import pytest

from docbench.binding import DocumentDBBinding
from docbench.client import MemoryDocumentClient
from docbench.config import load_settings, reset_settings
from docbench.logging import reset_logging


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Isolate every test from DOCUMENTDB_* variables, .env files, cached settings and logging."""
    for name in list(os.environ):
        if name.startswith("DOCUMENTDB_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    reset_settings()
    reset_logging()
    yield
    reset_settings()
    reset_logging()


@pytest.fixture
def settings():
    """Settings for a partitioned in-memory store."""
    return load_settings(endpoint="memory://", credential="secret", client_type="memory")


@pytest.fixture
def memory_client():
    return MemoryDocumentClient(partitioned=True)


@pytest.fixture
def binding(settings, memory_client):
    """Initialized binding over a partitioned in-memory store."""
    b = DocumentDBBinding(settings, client=memory_client)
    b.init()
    yield b
    b.cleanup()


@pytest.fixture
def single_partition_binding():
    """Initialized binding in single-partition mode over an unpartitioned store."""
    settings = load_settings(
        endpoint="memory://",
        credential="secret",
        client_type="memory",
        single_partition=True,
    )
    b = DocumentDBBinding(settings, client=MemoryDocumentClient(partitioned=False))
    b.init()
    yield b
    b.cleanup()
