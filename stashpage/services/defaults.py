from __future__ import annotations

import copy
import re
from types import MappingProxyType

from stashpage.services.document import StashPage, UnifiedStash


DEFAULT_PAGE_KEY = "links"

_ICON_CDN = "https://cdn.jsdelivr.net/gh/walkxcode/dashboard-icons/png"


def _favicon(domain: str) -> str:
    return f"https://www.google.com/s2/favicons?domain={domain}"


DEFAULT_STASH = MappingProxyType(
    {
        "stashes": {
            DEFAULT_PAGE_KEY: {
                "categories": [
                    {
                        "title": "Essentials",
                        "icon": f"{_ICON_CDN}/google.png",
                        "baseUrl": "",
                        "links": [
                            {
                                "name": "Google",
                                "url": "https://www.google.com",
                                "icon": _favicon("www.google.com"),
                            },
                            {
                                "name": "Reddit",
                                "url": "https://www.reddit.com",
                                "icon": _favicon("www.reddit.com"),
                            },
                            {
                                "name": "GitHub",
                                "url": "https://github.com",
                                "icon": f"{_ICON_CDN}/github.png",
                            },
                            {
                                "name": "Amazon",
                                "url": "https://www.amazon.com",
                                "icon": _favicon("www.amazon.com"),
                            },
                        ],
                        "positions": {
                            "collapsed": 0,
                            "geometry": {"x": 1520, "y": 1120},
                        },
                    },
                    {
                        "title": "Media",
                        "icon": f"{_ICON_CDN}/youtube.png",
                        "baseUrl": "",
                        "links": [
                            {
                                "name": "YouTube",
                                "url": "https://www.youtube.com",
                                "icon": _favicon("www.youtube.com"),
                            },
                            {
                                "name": "Twitch",
                                "url": "https://www.twitch.tv",
                                "icon": _favicon("www.twitch.tv"),
                            },
                        ],
                        "positions": {
                            "collapsed": 0,
                            "geometry": {"x": 2200, "y": 1120},
                        },
                    },
                    {
                        "title": "Homelab Tools",
                        "icon": f"{_ICON_CDN}/docker.png",
                        "baseUrl": "",
                        "links": [
                            {
                                "name": "Proxmox",
                                "url": "https://10.0.1.2:8006/",
                                "icon": f"{_ICON_CDN}/proxmox.png",
                            },
                            {
                                "name": "Uptime Kuma",
                                "url": "http://10.0.1.5:3001/dashboard",
                                "icon": f"{_ICON_CDN}/uptime-kuma.png",
                            },
                            {
                                "name": "AdGuard",
                                "url": "http://10.0.1.6/",
                                "icon": f"{_ICON_CDN}/adguard-home.png",
                            },
                        ],
                        "positions": {
                            "collapsed": 0,
                            "geometry": {"x": 1860, "y": 1120},
                        },
                    },
                ]
            }
        }
    }
)


def default_document() -> UnifiedStash:
    # every call hands out a private copy; DEFAULT_STASH itself is never attached
    return UnifiedStash.from_dict(copy.deepcopy(dict(DEFAULT_STASH)))


def empty_page() -> StashPage:
    return StashPage(categories=[])


PAGE_EMOJI = {
    "media": "🎬",
    "music": "🎵",
    "videos": "📹",
    "movies": "🎥",
    "tv": "📺",
    "podcasts": "🎙️",
    "streaming": "📡",
    "books": "📚",
    "reading": "📖",
    "articles": "📰",
    "blog": "✍️",
    "wiki": "📖",
    "docs": "📄",
    "documentation": "📚",
    "learning": "📝",
    "courses": "🎓",
    "work": "💼",
    "business": "💼",
    "calendar": "📅",
    "tasks": "✅",
    "todo": "📋",
    "dev": "💻",
    "code": "⌨️",
    "github": "🐙",
    "git": "🔀",
    "api": "🔌",
    "database": "🗄️",
    "server": "🖥️",
    "cloud": "☁️",
    "docker": "🐳",
    "devops": "⚙️",
    "linux": "🐧",
    "homelab": "🐧",
    "lab": "🐧",
    "design": "🎨",
    "art": "🎨",
    "photos": "📷",
    "social": "👥",
    "chat": "💬",
    "email": "📧",
    "mail": "📮",
    "shopping": "🛒",
    "finance": "💰",
    "banking": "🏦",
    "crypto": "₿",
    "stocks": "📈",
    "food": "🍔",
    "recipes": "🍳",
    "coffee": "☕",
    "travel": "✈️",
    "maps": "🗺️",
    "sports": "⚽",
    "fitness": "💪",
    "health": "🏥",
    "gaming": "🎮",
    "games": "🎯",
    "tools": "🔧",
    "apps": "📱",
    "downloads": "⬇️",
    "projects": "🚀",
    "ideas": "💡",
    "notes": "📋",
    "files": "📁",
    "archive": "📦",
    "backup": "💾",
    "links": "🔗",
    "favorites": "⭐",
    "bookmarks": "🔖",
    "personal": "👤",
    "private": "🔒",
    "public": "🌍",
    "research": "🔬",
    "science": "🔬",
    "data": "📊",
    "news": "📡",
    "tech": "💻",
    "weather": "🌤️",
}
DEFAULT_PAGE_EMOJI = "📁"


def page_emoji(page_name: str) -> str:
    lowered = (page_name or "").lower()
    if lowered in PAGE_EMOJI:
        return PAGE_EMOJI[lowered]
    for keyword, emoji in PAGE_EMOJI.items():
        if re.search(rf"\b{re.escape(keyword)}\b", lowered):
            return emoji
    return DEFAULT_PAGE_EMOJI
