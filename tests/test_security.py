import pytest
from flask import g
from flask_login import login_user

from stashpage.extensions import db
from stashpage.models import User
from stashpage.services.errors import Forbidden, Unauthorized
from stashpage.services.security import (
    current_actor,
    current_user_id,
    is_demo,
    is_logged_in,
    stash_login_required,
)


def _create_user(username="u1", is_demo=False):
    user = User(username=username, is_demo=is_demo)
    user.set_password("secret")
    db.session.add(user)
    db.session.commit()
    return user


@stash_login_required(json=True, write=True)
def _guarded_write():
    return g.stash_actor


def test_anonymous_session_has_no_actor(app):
    with app.test_request_context("/api/v1/stash/pages"):
        assert is_logged_in() is False
        assert current_user_id() == 0
        assert is_demo() is False
        assert current_actor() is None
        with pytest.raises(Unauthorized):
            _guarded_write()


def test_actor_reflects_logged_in_user(app):
    with app.app_context():
        user = _create_user("alice")
        user_id = user.id

    with app.test_request_context("/stash"):
        login_user(db.session.get(User, user_id))

        actor = current_actor()
        assert actor.user_id == user_id == current_user_id()
        assert actor.username == "alice"
        assert actor.is_demo is False
        assert _guarded_write() == actor


def test_demo_actor_is_blocked_from_writes(app):
    with app.app_context():
        user_id = _create_user("demo", is_demo=True).id

    with app.test_request_context("/stash"):
        login_user(db.session.get(User, user_id))

        assert is_demo() is True
        assert current_actor().is_demo is True
        with pytest.raises(Forbidden):
            _guarded_write()
