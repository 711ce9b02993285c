"""Tests for ActionGate."""

import asyncio

import pytest

from pharmacart.errors import DuplicateSubmission, RequestDropped
from pharmacart.gate import ActionGate


class TestSingleFlight:
    """One in-flight request per key."""

    def test_returns_result(self, gate):
        """A lone request completes normally and frees its key."""

        async def work():
            return 42

        assert asyncio.run(gate.run("k", work)) == 42
        assert not gate.busy("k")

    def test_duplicate_refused(self, gate):
        """A second run for a busy key raises; the first still completes."""
        calls = []

        async def scenario():
            release = asyncio.Event()

            async def work():
                calls.append("sent")
                await release.wait()
                return "done"

            first = asyncio.create_task(gate.run("k", work))
            await asyncio.sleep(0)
            assert gate.busy("k")

            with pytest.raises(DuplicateSubmission) as exc:
                await gate.run("k", work)
            assert exc.value.key == "k"

            release.set()
            return await first

        assert asyncio.run(scenario()) == "done"
        assert calls == ["sent"]

    def test_distinct_keys_independent(self, gate):
        """Different keys run concurrently."""

        async def scenario():
            async def work(value):
                await asyncio.sleep(0)
                return value

            return await asyncio.gather(
                gate.run("a", lambda: work(1)),
                gate.run("b", lambda: work(2)),
            )

        assert asyncio.run(scenario()) == [1, 2]

    def test_failure_frees_key(self, gate):
        """Errors propagate and the key is released."""

        async def boom():
            raise RuntimeError("nope")

        with pytest.raises(RuntimeError):
            asyncio.run(gate.run("k", boom))

        assert not gate.busy("k")


class TestClose:
    """Closing cancels in-flight work and drops results."""

    def test_close_drops_in_flight(self, gate):
        """An outstanding request raises RequestDropped once the gate closes."""
        applied = []

        async def scenario():
            async def work():
                await asyncio.sleep(10)
                applied.append("result")

            task = asyncio.create_task(gate.run("k", work))
            await asyncio.sleep(0)
            gate.close()
            with pytest.raises(RequestDropped):
                await task

        asyncio.run(scenario())

        assert applied == []
        assert gate.closed

    def test_run_after_close(self, gate):
        """A closed gate refuses new work without calling the factory."""
        called = []

        async def work():
            called.append(True)

        gate.close()

        with pytest.raises(RequestDropped):
            asyncio.run(gate.run("k", work))
        assert called == []

    def test_context_manager_closes(self):
        """Leaving the async context closes the gate."""

        async def scenario():
            async with ActionGate() as gate:
                pass
            return gate

        assert asyncio.run(scenario()).closed
