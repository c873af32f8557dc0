"""Shared test fixtures."""

import logging
import os
from unittest.mock import patch

import pytest

from rrulecodec.config.settings import RRuleCodecSettings, reset_settings
from rrulecodec.parser import RRuleStringParser
from rrulecodec.utils.logging import ROOT_LOGGER_NAME


@pytest.fixture
def clean_env():
    """Drop RRULECODEC_ environment variables for the duration of a test."""
    env = {key: value for key, value in os.environ.items() if not key.upper().startswith("RRULECODEC_")}
    with patch.dict("os.environ", env, clear=True):
        yield


@pytest.fixture
def settings(clean_env, tmp_path):
    """Create settings with defaults only, isolated from any YAML config on disk."""
    reset_settings()
    with patch.object(RRuleCodecSettings, "_find_config_file", return_value=None):
        yield RRuleCodecSettings(config_dir=tmp_path)
    reset_settings()


@pytest.fixture
def parser(settings):
    """Create a parser with default settings."""
    return RRuleStringParser(settings)


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Close handlers installed on the package logger by a test."""
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
