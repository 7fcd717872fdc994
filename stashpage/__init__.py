import click
from flask import Flask, jsonify

from stashpage.api import api_bp
from stashpage.auth import auth_bp
from stashpage.config import Config
from stashpage.extensions import db, login_manager, migrate
from stashpage.services.errors import StashError
from stashpage.web import web_bp


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    app.register_blueprint(auth_bp)
    app.register_blueprint(web_bp)
    app.register_blueprint(api_bp)

    @app.errorhandler(StashError)
    def handle_stash_error(error: StashError):
        if error.status_code >= 500:
            app.logger.error("Stash operation failed: %s", error.message)
        return jsonify(error.as_dict()), error.status_code

    @app.cli.command("init-db")
    def init_db_command():
        db.create_all()
        print("Initialized Stashpage database.")

    @app.cli.command("create-user")
    @click.argument("username")
    @click.option("--password", prompt=True, hide_input=True)
    @click.option("--admin", is_flag=True, default=False)
    @click.option("--demo", is_flag=True, default=False)
    def create_user_command(username, password, admin, demo):
        from stashpage.auth.routes import create_account

        user = create_account(username, password, is_admin=admin, is_demo=demo)
        print(f"Created user {user.username} (id {user.id}).")

    with app.app_context():
        db.create_all()

    app.logger.info("Stashpage initialized with default content and validation")
    return app
