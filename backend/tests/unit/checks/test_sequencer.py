"""Unit tests for the throttled chain sequencer."""

import asyncio
import time

import pytest

from awschecker.adapters.probe_metrics import FakeProbeMetrics
from awschecker.checks.sequencer import ThrottledSequencer
from awschecker.checks.types import CheckChain, OperationStep, Outcome
from awschecker.core.cancellation import CancellationSignal

# ---------------------------------------------------------------------------
# Stub steps
# ---------------------------------------------------------------------------


class _Target:
    """Shared log of step invocations."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, float]] = []

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


def _ok(name: str, target: _Target) -> OperationStep:
    async def action(t: _Target) -> None:
        t.calls.append((name, time.monotonic()))

    return OperationStep(name, target, action)


def _failing(name: str, target: _Target, exc: Exception) -> OperationStep:
    async def action(t: _Target) -> None:
        t.calls.append((name, time.monotonic()))
        raise exc

    return OperationStep(name, target, action)


def _cancelling(name: str, target: _Target, cancel: CancellationSignal) -> OperationStep:
    """Step that fires the cancellation signal while it runs."""

    async def action(t: _Target) -> None:
        t.calls.append((name, time.monotonic()))
        cancel.fire()

    return OperationStep(name, target, action)


# ---------------------------------------------------------------------------
# ThrottledSequencer
# ---------------------------------------------------------------------------


class TestCompletedChains:
    """Chains that run to completion report exactly one observation."""

    @pytest.mark.asyncio
    async def test_single_step_success(self):
        target = _Target()
        fake = FakeProbeMetrics()
        sequencer = ThrottledSequencer(fake, CancellationSignal(), delay=0.0)

        obs = await sequencer.run("S3", CheckChain.single(_ok("GetObject", target)))

        assert obs is not None
        assert obs.outcome == Outcome.success
        assert obs.duration >= 0
        assert fake.observations == [obs]
        assert (obs.service, obs.method) == ("S3", "GetObject")

    @pytest.mark.asyncio
    async def test_chain_reports_under_chain_method(self):
        target = _Target()
        fake = FakeProbeMetrics()
        sequencer = ThrottledSequencer(fake, CancellationSignal(), delay=0.0)
        chain = CheckChain(
            method="PutGetItemConsistent",
            steps=(_ok("PutItem", target), _ok("GetItemConsistent", target)),
        )

        await sequencer.run("DynamoDB", chain)

        assert target.names() == ["PutItem", "GetItemConsistent"]
        assert fake.labels() == {("DynamoDB", "PutGetItemConsistent", "Success")}
        assert len(fake.observations) == 1

    @pytest.mark.asyncio
    async def test_failure_aborts_remaining_steps(self):
        target = _Target()
        fake = FakeProbeMetrics()
        sequencer = ThrottledSequencer(fake, CancellationSignal(), delay=0.0)
        chain = CheckChain(
            method="Chain",
            steps=(
                _ok("first", target),
                _failing("second", target, ConnectionError("refused")),
                _ok("third", target),
            ),
        )

        obs = await sequencer.run("DynamoDB", chain)

        assert target.names() == ["first", "second"]
        assert obs.outcome == Outcome.failure
        assert fake.labels() == {("DynamoDB", "Chain", "Failure")}

    @pytest.mark.asyncio
    async def test_failing_first_step_runs_nothing_else(self):
        target = _Target()
        fake = FakeProbeMetrics()
        sequencer = ThrottledSequencer(fake, CancellationSignal(), delay=0.0)
        chain = CheckChain(
            method="Chain",
            steps=(_failing("first", target, RuntimeError("boom")), _ok("second", target)),
        )

        obs = await sequencer.run("S3", chain)

        assert target.names() == ["first"]
        assert obs.outcome == Outcome.failure

    @pytest.mark.asyncio
    async def test_failure_is_logged_with_method_and_error(self, caplog):
        target = _Target()
        sequencer = ThrottledSequencer(FakeProbeMetrics(), CancellationSignal(), delay=0.0)

        with caplog.at_level("ERROR", logger="awschecker"):
            await sequencer.run(
                "SQS",
                CheckChain.single(_failing("ReceiveMessage", target, ValueError("queue gone"))),
            )

        messages = [r.getMessage() for r in caplog.records]
        assert any("ReceiveMessage" in m and "queue gone" in m for m in messages)

    @pytest.mark.asyncio
    async def test_step_error_does_not_propagate(self):
        target = _Target()
        sequencer = ThrottledSequencer(FakeProbeMetrics(), CancellationSignal(), delay=0.0)

        obs = await sequencer.run(
            "S3", CheckChain.single(_failing("GetObject", target, KeyError("missing")))
        )

        assert obs.outcome == Outcome.failure


class TestInterStepDelay:
    """The delay separates consecutive steps and never trails the last one."""

    @pytest.mark.asyncio
    async def test_delay_between_steps_is_honored(self):
        delay = 0.05
        target = _Target()
        fake = FakeProbeMetrics()
        sequencer = ThrottledSequencer(fake, CancellationSignal(), delay=delay)
        chain = CheckChain(
            method="Chain",
            steps=(_ok("a", target), _ok("b", target), _ok("c", target)),
        )

        obs = await sequencer.run("DynamoDB", chain)

        starts = [ts for _, ts in target.calls]
        assert starts[1] - starts[0] >= delay - 0.001
        assert starts[2] - starts[1] >= delay - 0.001
        # Duration spans the whole chain, including both delays.
        assert obs.duration >= 2 * delay - 0.002

    @pytest.mark.asyncio
    async def test_single_step_chain_never_waits(self):
        target = _Target()
        sequencer = ThrottledSequencer(FakeProbeMetrics(), CancellationSignal(), delay=10.0)

        obs = await asyncio.wait_for(
            sequencer.run("S3", CheckChain.single(_ok("GetObject", target))),
            timeout=1.0,
        )

        assert obs.outcome == Outcome.success
        assert obs.duration < 1.0

    @pytest.mark.asyncio
    async def test_no_delay_after_failing_step(self):
        target = _Target()
        sequencer = ThrottledSequencer(FakeProbeMetrics(), CancellationSignal(), delay=10.0)
        chain = CheckChain(
            method="Chain",
            steps=(_failing("a", target, RuntimeError("x")), _ok("b", target)),
        )

        obs = await asyncio.wait_for(sequencer.run("S3", chain), timeout=1.0)

        assert obs.outcome == Outcome.failure


class TestCancellation:
    """Chains abandoned by cancellation report nothing."""

    @pytest.mark.asyncio
    async def test_cancelled_before_start(self):
        target = _Target()
        fake = FakeProbeMetrics()
        cancel = CancellationSignal()
        cancel.fire()
        sequencer = ThrottledSequencer(fake, cancel, delay=0.0)

        obs = await sequencer.run("S3", CheckChain.single(_ok("GetObject", target)))

        assert obs is None
        assert target.calls == []
        assert fake.observations == []

    @pytest.mark.asyncio
    async def test_cancel_during_delay_wakes_early_and_records_nothing(self):
        target = _Target()
        fake = FakeProbeMetrics()
        cancel = CancellationSignal()
        sequencer = ThrottledSequencer(fake, cancel, delay=10.0)
        chain = CheckChain(method="Chain", steps=(_ok("a", target), _ok("b", target)))

        task = asyncio.create_task(sequencer.run("DynamoDB", chain))
        await asyncio.sleep(0.05)
        cancel.fire()
        obs = await asyncio.wait_for(task, timeout=1.0)

        assert obs is None
        assert target.names() == ["a"]
        assert fake.observations == []

    @pytest.mark.asyncio
    async def test_cancel_during_step_abandons_rest_of_chain(self):
        target = _Target()
        fake = FakeProbeMetrics()
        cancel = CancellationSignal()
        sequencer = ThrottledSequencer(fake, cancel, delay=0.0)
        chain = CheckChain(
            method="Chain",
            steps=(_cancelling("a", target, cancel), _ok("b", target)),
        )

        obs = await sequencer.run("DynamoDB", chain)

        assert obs is None
        assert target.names() == ["a"]
        assert fake.observations == []


class TestCheckChain:
    def test_empty_chain_rejected(self):
        with pytest.raises(ValueError):
            CheckChain(method="Empty", steps=())

    def test_single_uses_step_name(self):
        step = _ok("Scan", _Target())
        chain = CheckChain.single(step)

        assert chain.method == "Scan"
        assert chain.steps == (step,)
