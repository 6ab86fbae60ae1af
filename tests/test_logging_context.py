"""Tests for logging context propagation."""

import contextvars
import threading

from platform_monitor.logging.context import (
    clear_log_context,
    get_log_context,
    log_context,
    pop_log_context,
    push_log_context,
)


def test_empty_context():
    """Test that context starts empty."""
    assert get_log_context() == {}


def test_push_and_pop():
    """Test pushing fields and restoring the previous context."""
    token = push_log_context(run_id="abc123", source_name="HackerNews")
    assert get_log_context() == {"run_id": "abc123", "source_name": "HackerNews"}

    pop_log_context(token)
    assert get_log_context() == {}


def test_nested_context():
    """Test nested context managers merge and unwind in order."""
    with log_context(run_id="abc123"):
        with log_context(source_name="ProductHunt", source_kind="embedded-json"):
            assert get_log_context() == {
                "run_id": "abc123",
                "source_name": "ProductHunt",
                "source_kind": "embedded-json",
            }
        assert get_log_context() == {"run_id": "abc123"}

    assert get_log_context() == {}


def test_inner_value_overrides_outer():
    with log_context(source_name="outer"):
        with log_context(source_name="inner"):
            assert get_log_context()["source_name"] == "inner"
        assert get_log_context()["source_name"] == "outer"


def test_context_restored_on_exception():
    """Test the context unwinds even if the block raises."""
    try:
        with log_context(run_id="abc123"):
            raise RuntimeError("boom")
    except RuntimeError:
        pass

    assert get_log_context() == {}


def test_get_log_context_returns_copy():
    with log_context(run_id="abc123"):
        snapshot = get_log_context()
        snapshot["run_id"] = "changed"

        assert get_log_context()["run_id"] == "abc123"


def test_clear_log_context():
    push_log_context(run_id="abc123")
    clear_log_context()

    assert get_log_context() == {}


def test_copied_context_reaches_worker_thread():
    """Test a thread running inside a copied context sees the fields."""
    seen = {}

    def worker():
        seen.update(get_log_context())

    with log_context(run_id="abc123"):
        ctx = contextvars.copy_context()

    thread = threading.Thread(target=ctx.run, args=(worker,))
    thread.start()
    thread.join()

    assert seen == {"run_id": "abc123"}
