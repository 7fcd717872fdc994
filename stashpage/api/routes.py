from __future__ import annotations

from flask import g, jsonify, request

from stashpage.api import api_bp
from stashpage.services.bulk import SearchOutcome, query_too_short, search_links
from stashpage.services.common import is_valid_page_key
from stashpage.services.security import (
    current_pages,
    stash_login_required,
    stash_settings,
)
from stashpage.services.store import store


def _json_payload() -> dict:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def _error(message: str, status_code: int = 400):
    return jsonify({"error": message}), status_code


@api_bp.route("/health")
def health():
    return jsonify({"ok": True})


@api_bp.route("/v1/stash/pages", methods=["GET"])
@stash_login_required(json=True)
def pages_list():
    return jsonify({"pages": current_pages().page_names()})


@api_bp.route("/v1/stash/category/toggle", methods=["POST"])
@stash_login_required(json=True, write=True)
def toggle_category_state():
    payload = _json_payload()
    page_key = payload.get("page_key")
    category_title = payload.get("category_title")
    state = payload.get("state")

    # state may legitimately be 0
    if page_key is None or category_title is None or state is None:
        return _error("Missing required parameters")
    if not is_valid_page_key(page_key):
        return _error("Invalid page name")

    current_pages().set_category_state(page_key, str(category_title), state)
    return jsonify({"success": 1})


@api_bp.route("/v1/stash/toggle-public", methods=["POST"])
@stash_login_required(json=True, write=True)
def toggle_public():
    payload = _json_payload()
    page_key = payload.get("page_key")
    is_public = payload.get("is_public")

    if page_key is None or is_public is None:
        return _error("Missing required parameters")
    if not is_valid_page_key(page_key):
        return _error("Invalid page name")

    flag = current_pages().set_public(page_key, is_public)
    return jsonify({"success": 1, "page_key": page_key, "is_public": flag})


@api_bp.route("/search", methods=["GET"])
@stash_login_required(json=True)
def search_api():
    query = request.args.get("q") or ""
    settings = stash_settings()
    if query_too_short(query, settings.search_min_length):
        return jsonify(SearchOutcome(too_short=True).as_dict())

    doc = store.get(g.stash_actor.user_id)
    return jsonify(search_links(doc, query, settings.search_min_length).as_dict())
