"""Shared pytest fixtures."""

from __future__ import annotations

import os

import pytest

from tests.helpers import NotificationRecorder, StubQueryClient

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture
def stub_client() -> StubQueryClient:
    return StubQueryClient()


@pytest.fixture
def recorder() -> NotificationRecorder:
    return NotificationRecorder()
