import pytest

from stellar_evolution.catalog import generate_catalog


@pytest.fixture(scope="session")
def catalog():
    """Default catalog: 600 main-sequence stars, seed 42."""
    return generate_catalog(600, seed=42)


@pytest.fixture
def client():
    """Flask test client for the web app."""
    from app import app

    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client
