import pytest

from stashpage.services.defaults import (
    DEFAULT_PAGE_KEY,
    DEFAULT_STASH,
    default_document,
    page_emoji,
)
from stashpage.services.document import UnifiedStash
from stashpage.services.errors import InvalidStructure


def test_from_dict_fills_missing_parts():
    doc = UnifiedStash.from_dict(
        {"stashes": {"work": {}, "home": {"categories": [{"title": "Mail"}]}}}
    )

    assert doc.stashes["work"].categories == []
    assert doc.stashes["work"].is_public is False
    mail = doc.stashes["home"].categories[0]
    assert mail.links == []
    assert mail.collapsed == 0
    assert mail.geometry is None
    assert mail.color is None


def test_from_dict_normalizes_stored_color():
    doc = UnifiedStash.from_dict(
        {"stashes": {"p": {"categories": [{"title": "A", "color": "ABCDEF"}]}}}
    )
    assert doc.stashes["p"].categories[0].color == "#abcdef"


@pytest.mark.parametrize(
    "payload",
    [
        None,
        [],
        {},
        {"stashes": "not-an-object"},
        {"stashes": []},
        {"stashes": {"bad key": {"categories": []}}},
        {"stashes": {"p": "junk"}},
        {"stashes": {"p": {"categories": "junk"}}},
        {"stashes": {"p": {"categories": ["junk"]}}},
        {"stashes": {"p": {"categories": [{"title": "A", "links": {}}]}}},
        {"stashes": {"p": {"categories": [{"title": "A", "links": ["x"]}]}}},
    ],
)
def test_from_dict_rejects_malformed_documents(payload):
    with pytest.raises(InvalidStructure):
        UnifiedStash.from_dict(payload)


def test_to_dict_emits_canonical_layout():
    doc = UnifiedStash.from_dict(
        {
            "stashes": {
                "links": {
                    "is_public": 1,
                    "categories": [
                        {
                            "title": "Essentials",
                            "icon": "https://example.com/i.png",
                            "baseUrl": "https://example.com",
                            "color": "#112233",
                            "links": [{"name": "Docs", "url": "/docs"}],
                            "positions": {
                                "collapsed": 1,
                                "geometry": {"x": 10, "y": 20},
                            },
                        }
                    ],
                }
            }
        }
    )

    assert doc.to_dict() == {
        "stashes": {
            "links": {
                "is_public": 1,
                "categories": [
                    {
                        "title": "Essentials",
                        "icon": "https://example.com/i.png",
                        "baseUrl": "https://example.com",
                        "color": "#112233",
                        "links": [{"name": "Docs", "url": "/docs", "icon": ""}],
                        "positions": {
                            "collapsed": 1,
                            "geometry": {"x": 10, "y": 20},
                        },
                    }
                ],
            }
        }
    }


def test_default_document_is_a_private_copy():
    first = default_document()
    second = default_document()

    first.stashes[DEFAULT_PAGE_KEY].categories[0].links.clear()

    assert second.stashes[DEFAULT_PAGE_KEY].categories[0].links
    assert DEFAULT_STASH["stashes"][DEFAULT_PAGE_KEY]["categories"][0]["links"]
    assert [c.title for c in second.stashes[DEFAULT_PAGE_KEY].categories] == [
        "Essentials",
        "Media",
        "Homelab Tools",
    ]


def test_page_emoji_matches_exact_then_word():
    assert page_emoji("links") == "🔗"
    assert page_emoji("Media") == "🎬"
    assert page_emoji("my work stuff") == "💼"
    assert page_emoji("zzz") == "📁"
