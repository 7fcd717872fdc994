import pytest

from stashpage import create_app
from stashpage.config import TestConfig
from stashpage.extensions import db
from stashpage.services.common import StashSettings


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.drop_all()
        db.create_all()
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def settings():
    return StashSettings(
        default_position_x=50,
        default_position_y=50,
        max_categories_per_page=5,
        enable_position_validation=True,
    )
