"""Shared test fixtures for the dicebox test suite.

Random sources
--------------
FixedRandom   returns the same float on every draw; 0.5 gives the midpoint
              face of any die (4 on a d6) and 0.99 gives the top face.
SequenceRandom returns queued floats in order, for tests that need the bonus
              d6 to differ from the base dice.

client        AsyncClient wired to the FastAPI app, with the random source
              dependency overridden to a FixedRandom(0.5).
"""

from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from dicebox.dependencies import get_random_source
from dicebox.main import app


class FixedRandom:
    def __init__(self, value: float) -> None:
        self.value = value

    def random(self) -> float:
        return self.value


class SequenceRandom:
    def __init__(self, values: list[float]) -> None:
        self._values = list(values)

    def random(self) -> float:
        return self._values.pop(0)


@pytest.fixture
def midpoint_rng() -> FixedRandom:
    return FixedRandom(0.5)


@pytest.fixture
def max_rng() -> FixedRandom:
    return FixedRandom(0.99)


@pytest_asyncio.fixture
async def client():
    """AsyncClient wired to the app with deterministic midpoint rolls."""
    app.dependency_overrides[get_random_source] = lambda: FixedRandom(0.5)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.pop(get_random_source, None)


@pytest.fixture
def sequence_rng():
    """Factory: ``sequence_rng([0.1, 0.5])`` yields those floats in order."""
    return SequenceRandom
