from functools import wraps

from flask import current_app, g, redirect, url_for
from flask_login import current_user

from stashpage.services.common import StashSettings
from stashpage.services.errors import Forbidden, Unauthorized
from stashpage.services.pages import PageOperations, StashActor


def is_logged_in() -> bool:
    return bool(current_user.is_authenticated)


def current_user_id() -> int:
    if not is_logged_in():
        return 0
    return current_user.id


def is_demo() -> bool:
    return bool(is_logged_in() and current_user.is_demo)


def current_actor() -> StashActor | None:
    if not is_logged_in():
        return None
    return StashActor(
        user_id=current_user_id(),
        is_demo=is_demo(),
        username=current_user.username,
    )


def stash_settings() -> StashSettings:
    return StashSettings.from_config(current_app.config)


def current_pages() -> PageOperations:
    return PageOperations(g.stash_actor, stash_settings())


def stash_login_required(json=False, write=False):
    def decorator(func):
        @wraps(func)
        def wrapped(*args, **kwargs):
            actor = current_actor()
            if actor is None:
                if json:
                    raise Unauthorized()
                return redirect(url_for("auth.login"))
            if write and actor.is_demo:
                raise Forbidden()
            g.stash_actor = actor
            return func(*args, **kwargs)

        return wrapped

    return decorator
