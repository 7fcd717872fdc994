from __future__ import annotations

import json

from flask import Response, g, jsonify, redirect, request, url_for

from stashpage.models import User
from stashpage.services.bulk import EXPORT_FILENAME, export_document, import_document
from stashpage.services.common import is_valid_page_key
from stashpage.services.defaults import page_emoji
from stashpage.services.errors import InvalidInput, NotFound
from stashpage.services.pages import render_public_page
from stashpage.services.security import (
    current_actor,
    current_pages,
    stash_login_required,
    stash_settings,
)
from stashpage.services.store import store
from stashpage.services.transforms import NOT_FOUND
from stashpage.web import web_bp


def _page_links(page_names: list[str]) -> list[dict]:
    return [{"name": name, "emoji": page_emoji(name)} for name in page_names]


def _public_page(username: str, page_key: str):
    owner = User.query.filter_by(username=username).first()
    if not owner:
        raise NotFound("Page not found.")
    categories = render_public_page(owner.id, page_key, stash_settings())
    return jsonify(
        {
            "page_key": page_key,
            "owner": owner.username,
            "categories": categories,
            "read_only": True,
        }
    )


@web_bp.route("/")
@web_bp.route("/stash")
def stash_index():
    page_key = request.args.get("n") or ""
    owner_name = (request.args.get("u") or "").strip()
    if owner_name and page_key:
        return _public_page(owner_name, page_key)

    actor = current_actor()
    if actor is None:
        return redirect(url_for("auth.login"))
    g.stash_actor = actor
    pages = current_pages()
    page_names = pages.page_names()

    if not page_key:
        return jsonify(
            {
                "page_names": page_names,
                "pages": _page_links(page_names),
                "show_index_page": True,
                "categories": [],
                "page_key": "",
            }
        )

    if not is_valid_page_key(page_key):
        raise InvalidInput("Invalid page name.")

    categories = pages.render(page_key)
    if categories is NOT_FOUND:
        return redirect(url_for("web.stash_index"))

    return jsonify(
        {
            "page_names": page_names,
            "pages": _page_links(page_names),
            "show_index_page": False,
            "categories": categories,
            "page_key": page_key,
        }
    )


@web_bp.route("/edit", methods=["GET"])
@stash_login_required()
def edit_page():
    page_key = request.args.get("n") or ""
    if not page_key:
        raise InvalidInput("Page name is required.")
    categories = current_pages().open_for_edit(page_key)
    return jsonify({"page_key": page_key, "categories": categories})


@web_bp.route("/edit", methods=["POST"])
@stash_login_required(write=True)
def save_page():
    page_key = request.form.get("page_key") or ""
    if not is_valid_page_key(page_key):
        raise InvalidInput("Invalid page name.")
    try:
        categories = json.loads(request.form.get("stash_data") or "")
    except ValueError as exc:
        raise InvalidInput("Invalid JSON.") from exc

    current_pages().save(page_key, categories)
    return redirect(url_for("web.stash_index", n=page_key))


@web_bp.route("/stash/delete", methods=["POST"])
@stash_login_required(write=True)
def delete_page():
    page_key = request.form.get("page_key") or ""
    if page_key:
        current_pages().delete(page_key)
    return redirect(url_for("web.stash_index"))


@web_bp.route("/stash/rename", methods=["POST"])
@stash_login_required(write=True)
def rename_page():
    old_name = (request.form.get("old_page_name") or "").strip()
    new_name = (request.form.get("new_page_name") or "").strip()
    if not old_name or not new_name:
        raise InvalidInput("Missing parameters.")

    current_pages().rename(old_name, new_name)
    return redirect(url_for("web.stash_index"))


@web_bp.route("/stash/clone", methods=["POST"])
@stash_login_required(write=True)
def clone_page():
    source_name = (request.form.get("source_page_name") or "").strip()
    new_name = (request.form.get("new_page_name") or "").strip()
    if not source_name or not new_name:
        raise InvalidInput("Missing parameters.")

    current_pages().clone(source_name, new_name)
    return redirect(url_for("web.edit_page", n=new_name))


@web_bp.route("/stash/export")
@stash_login_required()
def export_stash():
    payload = export_document(store.get(g.stash_actor.user_id))
    return Response(
        payload,
        content_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@web_bp.route("/stash/import", methods=["POST"])
@stash_login_required(write=True)
def import_stash():
    upload = request.files.get("import_file")
    if not upload or not upload.filename:
        raise InvalidInput("No file uploaded or file is empty.")

    import_document(g.stash_actor, upload.read())
    return redirect(url_for("web.stash_index"))
