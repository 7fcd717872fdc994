import json

import pytest

from stashpage.extensions import db
from stashpage.models import User
from stashpage.services.bulk import (
    export_document,
    import_document,
    parse_import,
    query_too_short,
    search_links,
)
from stashpage.services.document import UnifiedStash
from stashpage.services.errors import Forbidden, InvalidFormat, InvalidStructure
from stashpage.services.pages import StashActor
from stashpage.services.store import DocumentStore


def _doc():
    return UnifiedStash.from_dict(
        {
            "stashes": {
                "links": {
                    "categories": [
                        {
                            "title": "Essentials",
                            "links": [
                                {"name": "Google", "url": "https://google.com"},
                                {"name": "Mail", "url": "https://mail.example.com"},
                            ],
                        }
                    ]
                },
                "dev": {
                    "categories": [
                        {
                            "title": "Code",
                            "links": [
                                {
                                    "name": "Search Docs",
                                    "url": "https://GOOGLE.dev/docs",
                                    "icon": "g.png",
                                }
                            ],
                        }
                    ]
                },
            }
        }
    )


def _create_user(username="u1"):
    user = User(username=username)
    user.set_password("secret")
    db.session.add(user)
    db.session.commit()
    return user


def test_search_matches_name_case_insensitively():
    outcome = search_links(_doc(), "goog")
    links_hits = [item for item in outcome.results if item["stash"] == "links"]

    assert links_hits == [
        {"name": "Google", "url": "https://google.com", "icon": "", "stash": "links"}
    ]
    assert outcome.too_short is False


def test_search_matches_url_and_scans_pages_in_sorted_order():
    outcome = search_links(_doc(), "GOOGLE")

    assert [item["stash"] for item in outcome.results] == ["dev", "links"]
    assert outcome.results[0]["icon"] == "g.png"


def test_search_short_query_does_not_scan():
    class Exploding:
        def page_names(self):
            raise AssertionError("document was scanned")

    outcome = search_links(Exploding(), "g")

    assert outcome.too_short is True
    assert outcome.as_dict() == {"results": [], "error": "Query too short"}
    assert not query_too_short("go")


def test_search_keeps_whitespace_in_query():
    doc = UnifiedStash.from_dict(
        {
            "stashes": {
                "home": {
                    "categories": [
                        {
                            "title": "Start",
                            "links": [
                                {"name": "Home Page", "url": "https://home.test"},
                                {"name": "Pagerduty", "url": "https://pd.test"},
                            ],
                        }
                    ]
                }
            }
        }
    )

    assert not query_too_short("e ")
    assert query_too_short(" ")
    assert [item["name"] for item in search_links(doc, "e ").results] == ["Home Page"]
    assert [item["name"] for item in search_links(doc, " pa").results] == [
        "Home Page"
    ]


def test_search_without_matches_returns_empty_list():
    assert search_links(_doc(), "zzz").as_dict() == {"results": []}


def test_export_is_pretty_json_of_whole_document():
    payload = export_document(_doc())

    assert "\n  " in payload
    assert json.loads(payload) == _doc().to_dict()


@pytest.mark.parametrize("raw", [b"", b"{not json", "[1, 2", b"\xff\xfe\x00"])
def test_parse_import_rejects_unparseable_input(raw):
    with pytest.raises(InvalidFormat):
        parse_import(raw)


@pytest.mark.parametrize(
    "payload",
    [
        {"stashes": "not-an-object"},
        {"pages": {}},
        ["stashes"],
        {"stashes": {"../escape": {"categories": []}}},
    ],
)
def test_parse_import_rejects_bad_structure(payload):
    with pytest.raises(InvalidStructure):
        parse_import(json.dumps(payload))


def test_import_replaces_whole_document(app):
    with app.app_context():
        user = _create_user()
        store = DocumentStore()
        store.set(user.id, _doc())

        imported = json.dumps({"stashes": {"fresh": {"categories": []}}})
        import_document(StashActor(user_id=user.id), imported.encode(), store)

        assert store.get(user.id).page_names() == ["fresh"]


def test_rejected_import_leaves_document_unchanged(app):
    with app.app_context():
        user = _create_user()
        store = DocumentStore()
        store.set(user.id, _doc())
        before = store.get(user.id).to_dict()

        with pytest.raises(InvalidStructure):
            import_document(
                StashActor(user_id=user.id),
                json.dumps({"stashes": "not-an-object"}),
                store,
            )

        assert store.get(user.id).to_dict() == before


def test_demo_cannot_import(app):
    with app.app_context():
        user = _create_user()
        with pytest.raises(Forbidden):
            import_document(
                StashActor(user_id=user.id, is_demo=True),
                json.dumps({"stashes": {}}),
            )


def test_export_import_round_trip(app):
    with app.app_context():
        user = _create_user()
        store = DocumentStore()

        import_document(StashActor(user_id=user.id), export_document(_doc()), store)

        assert store.get(user.id).to_dict() == _doc().to_dict()
