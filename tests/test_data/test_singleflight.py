"""Tests for singleflight deduplication."""

import asyncio

import pytest

from stock_opinion.data.singleflight import SingleFlight


class TestSingleFlight:
    """Tests for SingleFlight.do."""

    def test_concurrent_callers_share_one_call(self):
        flight: SingleFlight[str] = SingleFlight("test")
        calls = []

        async def fetch():
            calls.append(1)
            await asyncio.sleep(0.01)
            return "result"

        async def run():
            return await asyncio.gather(*(flight.do("AAPL", fetch) for _ in range(5)))

        results = asyncio.run(run())

        assert len(calls) == 1
        assert [r for r, _ in results] == ["result"] * 5
        assert [joined for _, joined in results].count(False) == 1

    def test_different_keys_not_shared(self):
        flight: SingleFlight[str] = SingleFlight("test")
        calls = []

        async def fetch_for(key):
            calls.append(key)
            await asyncio.sleep(0)
            return key

        async def run():
            return await asyncio.gather(
                flight.do("AAPL", lambda: fetch_for("AAPL")),
                flight.do("MSFT", lambda: fetch_for("MSFT")),
            )

        results = asyncio.run(run())

        assert sorted(calls) == ["AAPL", "MSFT"]
        assert [r for r, _ in results] == ["AAPL", "MSFT"]

    def test_exception_shared_and_entry_cleared(self):
        flight: SingleFlight[str] = SingleFlight("test")

        async def fail():
            await asyncio.sleep(0.01)
            raise RuntimeError("upstream down")

        async def run():
            return await asyncio.gather(
                flight.do("AAPL", fail),
                flight.do("AAPL", fail),
                return_exceptions=True,
            )

        results = asyncio.run(run())

        assert all(isinstance(r, RuntimeError) for r in results)
        assert not flight.in_flight("AAPL")

    def test_sequential_calls_run_again(self):
        flight: SingleFlight[int] = SingleFlight("test")
        calls = []

        async def fetch():
            calls.append(1)
            return len(calls)

        async def run():
            first, _ = await flight.do("AAPL", fetch)
            second, _ = await flight.do("AAPL", fetch)
            return first, second

        assert asyncio.run(run()) == (1, 2)

    def test_failure_propagates(self):
        flight: SingleFlight[str] = SingleFlight("test")

        async def fail():
            raise ValueError("bad")

        with pytest.raises(ValueError, match="bad"):
            asyncio.run(flight.do("AAPL", fail))
