import logging

import structlog

from ua2.logging_config import bind_account, clear_account, setup_logging


def test_setup_logging_sets_root_level():
    setup_logging("DEBUG")

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert logging.getLogger("httpx").level == logging.WARNING

    setup_logging("WARNING")
    assert logging.getLogger().level == logging.WARNING


def test_bind_account_context():
    bind_account("0xacc")
    assert structlog.contextvars.get_contextvars()["account"] == "0xacc"

    clear_account()
    assert "account" not in structlog.contextvars.get_contextvars()
