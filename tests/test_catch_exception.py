import threading

import pytest

from faultpack.bridge import (
    Captured,
    CapturedRuntimeFault,
    Completed,
    ExceptionBridge,
    build_capture_policy,
)
import faultkit


def test_catch_exception_returns_completed_for_normal_return() -> None:
    outcome = faultkit.catch_exception(lambda: "ignored")

    assert outcome == Completed()
    assert outcome.ok is True
    assert outcome.error is None


def test_catch_exception_returns_captured_with_single_descriptor() -> None:
    def unit() -> None:
        raise ValueError("bad input")

    outcome = faultkit.catch_exception(unit)

    assert isinstance(outcome, Captured)
    assert outcome.ok is False
    assert outcome.error.name == "ValueError"
    assert outcome.error.message == "bad input"


def test_run_or_raise_converts_native_exception_to_captured_fault() -> None:
    def unit() -> None:
        raise ZeroDivisionError("divide by zero")

    with pytest.raises(CapturedRuntimeFault, match="divide by zero") as excinfo:
        faultkit.run_or_raise(unit)

    fault = excinfo.value
    assert fault.descriptor.name == "ZeroDivisionError"
    assert fault.__cause__ is None
    assert fault.__context__ is None


def test_run_or_raise_is_silent_on_success() -> None:
    calls: list[str] = []

    faultkit.run_or_raise(lambda: calls.append("ran"))

    assert calls == ["ran"]


def test_completed_raise_for_fault_is_noop() -> None:
    assert Completed().raise_for_fault() is None


def test_protect_decorator_binds_arguments_and_returns_outcome() -> None:
    received: list[tuple[int, int]] = []

    @faultkit.protect
    def store(left: int, right: int) -> int:
        received.append((left, right))
        if right == 0:
            raise ZeroDivisionError("division by zero")
        return left // right

    assert store(6, 3) == Completed()
    failed = store(1, right=0)

    assert isinstance(failed, Captured)
    assert failed.error.message == "division by zero"
    assert received == [(6, 3), (1, 0)]
    assert store.__name__ == "store"


def test_protect_decorator_accepts_policy() -> None:
    policy = build_capture_policy(intercept=(KeyError,))

    @faultkit.protect(policy=policy)
    def lookup(key: str) -> None:
        if key == "missing":
            raise KeyError(key)
        raise ValueError(key)

    assert isinstance(lookup("missing"), Captured)
    with pytest.raises(ValueError, match="other"):
        lookup("other")


def test_policy_limits_intercepted_exception_types() -> None:
    bridge = ExceptionBridge(policy=build_capture_policy(intercept=(LookupError,)))

    def index_fault() -> None:
        raise IndexError("out of range")

    def type_fault() -> None:
        raise TypeError("wrong type")

    assert isinstance(bridge.catch(index_fault), Captured)
    with pytest.raises(TypeError, match="wrong type"):
        bridge.catch(type_fault)


def test_policy_can_opt_into_base_exceptions() -> None:
    policy = build_capture_policy(intercept=(BaseException,))

    def unit() -> None:
        raise SystemExit(3)

    outcome = faultkit.catch_exception(unit, policy=policy)

    assert isinstance(outcome, Captured)
    assert outcome.error.name == "SystemExit"
    assert outcome.error.message == "3"


def test_concurrent_calls_do_not_share_state() -> None:
    workers = 8
    iterations = 50
    start_barrier = threading.Barrier(workers)
    results: dict[int, list[str]] = {}
    failures: list[BaseException] = []
    lock = threading.Lock()

    def worker(worker_id: int) -> None:
        try:
            start_barrier.wait(timeout=5)
            messages: list[str] = []
            for iteration in range(iterations):
                slot = faultkit.ErrorSlot()

                def unit(w: int = worker_id, i: int = iteration) -> None:
                    if i % 2:
                        raise RuntimeError(f"worker-{w}-{i}")

                ok = faultkit.run_protected(unit, slot)
                if ok:
                    assert slot.error is None
                else:
                    assert slot.error is not None
                    messages.append(slot.error.message)
            with lock:
                results[worker_id] = messages
        except Exception as error:  # pragma: no cover - surfaced through failures
            with lock:
                failures.append(error)

    threads = [threading.Thread(target=worker, args=(idx,)) for idx in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)

    assert not failures
    assert all(not thread.is_alive() for thread in threads)
    for worker_id in range(workers):
        assert results[worker_id] == [
            f"worker-{worker_id}-{i}" for i in range(iterations) if i % 2
        ]
