"""Pytest fixtures for the discrete_feedback test suite."""

import pytest

from discrete_feedback.feedback.stellar_feedback import DiscreteStellarFeedback


@pytest.fixture(scope="session")
def feedback():
    """The default feedback tables. Building runs every integration, so do it once."""
    return DiscreteStellarFeedback.build()
