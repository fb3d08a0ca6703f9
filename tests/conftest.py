"""Root test configuration shared by every test package."""

import pytest


@pytest.fixture
def anyio_backend():
    """Run anyio-marked tests on asyncio only."""
    return "asyncio"
