"""Test setup for richedit."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for pytest.

    This allows running integration tests selectively:
        pytest -m integration       # run only integration tests
        pytest -m "not integration" # skip integration tests
    """
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (talk to a real object store)",
    )


@pytest.fixture
def png_file():
    """A small PNG upload."""
    from richedit.schemas.upload import UploadFile

    return UploadFile(filename="sunset.beach.png", content_type="image/png", data=b"\x89PNG" + b"0" * 64)


@pytest.fixture
def changes() -> list[str]:
    """Collects markup passed to ``on_change``."""
    return []
