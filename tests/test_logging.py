"""Tests for logging setup and the logging context helpers."""

import logging

import structlog

from cluster_engine.core.logging import (
    clear_log_context,
    get_log_context,
    log_context,
    set_log_context,
    setup_logging,
    update_log_context,
)


def setup_function():
    clear_log_context()


def test_update_and_clear():
    set_log_context({"service": "cluster-engine"})
    update_log_context("cluster_id", "cluster_1")

    assert get_log_context() == {"service": "cluster-engine", "cluster_id": "cluster_1"}

    clear_log_context()

    assert get_log_context() == {}


def test_context_is_merged_into_events():
    set_log_context({"service": "cluster-engine"})
    update_log_context("cluster_id", "cluster_1")

    event = structlog.contextvars.merge_contextvars(None, "info", {"event": "Cluster created"})

    assert event == {"service": "cluster-engine", "cluster_id": "cluster_1", "event": "Cluster created"}


def test_get_returns_a_copy():
    get_log_context()["leak"] = True

    assert "leak" not in get_log_context()


def test_log_context_is_scoped():
    set_log_context({"service": "cluster-engine"})

    with log_context(sweep_id="abc") as context:
        assert context == {"service": "cluster-engine", "sweep_id": "abc"}
        assert get_log_context()["sweep_id"] == "abc"
        assert structlog.contextvars.get_contextvars()["sweep_id"] == "abc"

    assert get_log_context() == {"service": "cluster-engine"}
    assert "sweep_id" not in structlog.contextvars.get_contextvars()


def test_setup_logging_configures_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    try:
        setup_logging(level="debug", service_name="cluster-engine-tests", colors=False)

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)
    finally:
        root.handlers = handlers
        root.setLevel(level)
        structlog.reset_defaults()
