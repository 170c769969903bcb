from typing import List, Sequence, Tuple

import pytest

from ua2.core.execution.models import InvokeResult


class FakeTransport:
    """Records invokes and hands back sequential tx hashes."""

    def __init__(self, fail_with: Exception = None):
        self.sent: List[Tuple[str, str, List[str]]] = []
        self.fail_with = fail_with

    async def invoke(self, address: str, entrypoint: str, calldata: Sequence[str]) -> InvokeResult:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append((address, entrypoint, list(calldata)))
        return InvokeResult(tx_hash=hex(0x1000 + len(self.sent)))


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def failing_transport():
    def _make(exc: Exception) -> FakeTransport:
        return FakeTransport(fail_with=exc)
    return _make
