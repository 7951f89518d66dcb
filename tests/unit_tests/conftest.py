"""Shared fixtures for unit tests."""

from __future__ import annotations

import pytest
from fakes import GDAL_USAGE, OGR_USAGE, ScriptedRunner


@pytest.fixture
def gdal_runner() -> ScriptedRunner:
    return ScriptedRunner(GDAL_USAGE)


@pytest.fixture
def ogr_runner() -> ScriptedRunner:
    return ScriptedRunner(OGR_USAGE)
