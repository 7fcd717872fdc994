from flask import current_app, jsonify, redirect, request, url_for
from flask_login import current_user, login_required, login_user, logout_user
from sqlalchemy.exc import IntegrityError

from stashpage.auth import auth_bp
from stashpage.extensions import db
from stashpage.models import User
from stashpage.services.store import store


def _json_error(message: str, status_code: int = 400):
    return jsonify({"ok": False, "error": message}), status_code


def _credentials():
    username = (request.form.get("username") or "").strip()
    password = request.form.get("password") or ""
    return username, password


def create_account(
    username: str,
    password: str,
    email: str | None = None,
    is_admin: bool = False,
    is_demo: bool = False,
) -> User:
    user = User(
        username=username,
        email=email or None,
        is_admin=is_admin,
        is_demo=is_demo,
        is_active=True,
    )
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    store.initialize(user.id)
    current_app.logger.info("New user registered: %s", username)
    return user


@auth_bp.route("/bootstrap", methods=["GET", "POST"])
def bootstrap_admin():
    if User.query.count() > 0:
        return redirect(url_for("auth.login"))

    if request.method == "POST":
        username, password = _credentials()
        confirm = request.form.get("confirm_password") or ""

        if not username or not password:
            return _json_error("Username and password are required.")
        if password != confirm:
            return _json_error("Passwords do not match.")
        create_account(username, password, is_admin=True)
        return redirect(url_for("auth.login"))

    return jsonify({"bootstrap_required": True})


@auth_bp.route("/register", methods=["POST"])
def register():
    if not current_app.config.get("REGISTRATION_ENABLED", True):
        return _json_error("Registration is disabled.", 403)

    username, password = _credentials()
    confirm = request.form.get("confirm_password") or ""
    email = (request.form.get("email") or "").strip()

    if not username or not password:
        return _json_error("Username and password are required.")
    if password != confirm:
        return _json_error("Passwords do not match.")
    if User.query.filter_by(username=username).first():
        return _json_error("Username already exists.", 409)

    is_first_user = User.query.count() == 0
    try:
        create_account(username, password, email=email, is_admin=is_first_user)
    except IntegrityError:
        db.session.rollback()
        return _json_error("Username or email already exists.", 409)
    return redirect(url_for("auth.login"))


@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    if current_user.is_authenticated:
        return redirect(url_for("web.stash_index"))

    if User.query.count() == 0:
        return redirect(url_for("auth.bootstrap_admin"))

    if request.method == "POST":
        username, password = _credentials()
        user = User.query.filter_by(username=username).first()
        if user and user.is_active and user.check_password(password):
            login_user(user)
            return redirect(url_for("web.stash_index"))
        current_app.logger.warning("Failed login for %s", username)
        return _json_error("Invalid credentials.", 401)

    return jsonify({"login_required": True})


@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return redirect(url_for("auth.login"))
