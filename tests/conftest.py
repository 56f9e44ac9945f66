"""
Shared fixtures for registry tests.
"""

import pytest

from didv import VerificationRegistry


OWNER = "owner-account"


@pytest.fixture
def registry():
    """Fresh in-memory registry owned by OWNER."""
    reg = VerificationRegistry(":memory:", creator=OWNER)
    yield reg
    reg.close()


@pytest.fixture
def owner():
    return OWNER
