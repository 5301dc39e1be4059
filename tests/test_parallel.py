"""
Unit tests for work distribution strategies.
"""

import pytest

from wavtempo.parallel import (
    ProcessPoolMapper,
    ThreadPoolMapper,
    get_mapper,
    sequential_map,
)


class TestMappers:
    """All mappers apply fn and preserve input order."""

    def test_sequential(self):
        """Plain in-order map."""
        assert sequential_map(lambda x: x * 2, [3, 1, 2]) == [6, 2, 4]

    def test_sequential_empty(self):
        """Empty input, empty output."""
        assert sequential_map(abs, []) == []

    def test_thread_pool_order(self):
        """Thread results come back in submission order."""
        items = list(range(50))
        assert ThreadPoolMapper(8)(lambda x: x * x, items) == [x * x for x in items]

    def test_thread_pool_accepts_generator(self):
        """Any iterable is accepted."""
        assert ThreadPoolMapper(2)(abs, (x for x in [-1, -2, 3])) == [1, 2, 3]

    def test_process_pool_order(self):
        """Process results come back in submission order."""
        items = [-5, 4, -3, 2, -1]
        assert ProcessPoolMapper(2)(abs, items) == [5, 4, 3, 2, 1]

    def test_single_item_runs_inline(self):
        """Trivial inputs do not spin up a pool."""
        assert ProcessPoolMapper(4)(lambda x: x + 1, [1]) == [2]

    def test_invalid_workers(self):
        """Pool size must be positive."""
        with pytest.raises(ValueError):
            ThreadPoolMapper(0)

    def test_errors_propagate(self):
        """Worker exceptions surface to the caller."""
        def boom(x):
            raise RuntimeError(f"bad item {x}")

        with pytest.raises(RuntimeError, match="bad item"):
            ThreadPoolMapper(2)(boom, [1, 2])


class TestGetMapper:
    """Test backend resolution."""

    def test_sequential(self):
        assert get_mapper("sequential") is sequential_map

    def test_thread(self):
        mapper = get_mapper("thread", 3)
        assert isinstance(mapper, ThreadPoolMapper)
        assert mapper.max_workers == 3

    def test_process(self):
        assert isinstance(get_mapper("process", 2), ProcessPoolMapper)

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown parallel backend"):
            get_mapper("gpu")
