import pytest

from fireguard.cleanup_context import CleanupRegistry


@pytest.fixture(autouse=True)
def clean_cleanup_registry():
    """Keep registered teardown handlers from leaking between tests."""
    saved = list(CleanupRegistry._handlers)
    yield
    CleanupRegistry._handlers[:] = saved
