"""Shared fixtures for the pipeline tests."""

import pytest

from swx.config import PipelineConfig

from .fakes import FIXED_NOW


@pytest.fixture
def config():
    return PipelineConfig(timeout_s=0.2, meteor_seed=7)


@pytest.fixture
def clock():
    return lambda: FIXED_NOW
