"""
Pytest configuration for integration tests

Provides performance measurement fixtures
"""
import pytest
import time


@pytest.fixture
def performance_timer():
    """
    Context manager for measuring test execution time

    Usage:
        with performance_timer as timer:
            # ... code to measure ...

        assert timer.elapsed < 1.0  # Verify < 1 second
    """
    class Timer:
        def __init__(self):
            self.start = None
            self.end = None
            self.elapsed = None

        def __enter__(self):
            self.start = time.time()
            return self

        def __exit__(self, *args):
            self.end = time.time()
            self.elapsed = self.end - self.start

    return Timer()
