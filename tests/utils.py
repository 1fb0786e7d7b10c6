"""
Test utilities shared by Nominatim client tests.
"""

import json
from pathlib import Path
from typing import Any

TESTDATA_DIR = Path(__file__).parent / "testdata"


def loadTestData(name: str) -> bytes:
    """Read raw bytes of a recorded response from tests/testdata."""
    return (TESTDATA_DIR / name).read_bytes()


def parseJson(body: bytes) -> Any:
    """Decode recorded response body."""
    return json.loads(body.decode("utf-8"))
