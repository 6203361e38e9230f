import logging

import pytest
from click.testing import CliRunner


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drops handlers the CLI attaches so they never outlive a test's streams."""
    yield
    logger = logging.getLogger("markdown_toc")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
