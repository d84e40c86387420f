import pytest


@pytest.fixture
def context():
    """Context for passing data between steps."""
    return {}
