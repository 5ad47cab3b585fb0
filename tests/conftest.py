"""Shared fixtures: a virtual-time scheduler and a headless editor."""

from __future__ import annotations

import pytest

from greenside.draw.scheduler import ManualScheduler
from greenside.editor import MapEditor


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def editor(scheduler):
    return MapEditor(scheduler=scheduler)


@pytest.fixture
def created(editor):
    """Every draw.create event the editor emits."""
    events: list[dict] = []
    editor.bus.on("draw.create", events.append)
    return events
