"""Pytest configuration and shared fixtures for the markextract test suite.

This module provides shared fixtures and test configuration that are used
across the entire test suite.
"""

import logging

import pytest
from utils import GMAIL_REPLY_HTML, OUTLOOK_EMAIL_HTML

# Configure Hypothesis for property-based testing
try:
    from hypothesis import Phase, Verbosity, settings

    # Register custom Hypothesis profiles
    settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
    settings.register_profile("dev", max_examples=20)
    settings.register_profile(
        "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
    )

    # Load profile from environment or use default
    import os

    profile = os.getenv("HYPOTHESIS_PROFILE", "dev")
    settings.load_profile(profile)
except ImportError:
    # Hypothesis not installed, skip configuration
    pass


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests - full pipeline tests")
    config.addinivalue_line("markers", "slow: Slow tests that may take several seconds")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo CLI logging configuration so caplog sees package records."""
    yield
    logger = logging.getLogger("markextract")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    logging.captureWarnings(False)
    warnings_logger = logging.getLogger("py.warnings")
    warnings_logger.handlers.clear()
    warnings_logger.propagate = True


@pytest.fixture
def gmail_reply_html() -> str:
    """Provide a Gmail-style reply with a quoted message and a signature.

    Returns
    -------
    str
        Email body HTML

    """
    return GMAIL_REPLY_HTML


@pytest.fixture
def outlook_email_html() -> str:
    """Provide an Outlook (Word-generated) email body.

    Returns
    -------
    str
        Email body HTML with Office namespaces and conditional comments

    """
    return OUTLOOK_EMAIL_HTML
