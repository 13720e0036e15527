"""Package manifests as published in the bazaar stage index, and their sanitising."""

from __future__ import annotations

from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Any, Mapping
from urllib.parse import urlsplit

_ALLOWED_TAGS = frozenset(
    """
    a abbr acronym article aside b bdi bdo blockquote br caption cite code col colgroup
    dd del details dfn div dl dt em figcaption figure footer h1 h2 h3 h4 h5 h6 header hr
    i img ins kbd li mark ol p pre q rp rt ruby s samp section small span strike strong
    sub summary sup table tbody td tfoot th thead time tr tt u ul var wbr
    """.split()
)
_VOID_TAGS = frozenset({"br", "col", "hr", "img", "wbr"})
_SKIP_CONTENT_TAGS = frozenset(
    {"frame", "frameset", "iframe", "noembed", "noframes", "noscript", "nostyle", "object", "script", "style", "title"}
)
_GLOBAL_ATTRS = frozenset({"dir", "lang", "title"})
_ELEMENT_ATTRS = {
    "a": frozenset({"href"}),
    "img": frozenset({"src", "alt", "width", "height"}),
    "blockquote": frozenset({"cite"}),
    "q": frozenset({"cite"}),
    "del": frozenset({"cite", "datetime"}),
    "ins": frozenset({"cite", "datetime"}),
    "time": frozenset({"datetime"}),
    "ol": frozenset({"type", "start"}),
    "li": frozenset({"value"}),
    "td": frozenset({"colspan", "rowspan"}),
    "th": frozenset({"colspan", "rowspan", "scope"}),
}
_URL_ATTRS = frozenset({"href", "src", "cite"})
_SAFE_SCHEMES = frozenset({"", "http", "https", "mailto"})
_REQUIRES_ATTRS = frozenset({"a", "img"})


def _escape(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace("'", "&#39;")
        .replace('"', "&#34;")
    )


def _safe_url(value: str) -> bool:
    try:
        scheme = urlsplit(value.strip()).scheme.lower()
    except ValueError:
        return False
    return scheme in _SAFE_SCHEMES


class _Sanitizer(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.parts: list[str] = []
        self._skip_depth = 0
        self._suppressed: dict[str, int] = {}

    def _filter_attrs(self, tag: str, attrs: list[tuple[str, str | None]]) -> list[tuple[str, str]]:
        allowed = _GLOBAL_ATTRS | _ELEMENT_ATTRS.get(tag, frozenset())
        kept = []
        for name, value in attrs:
            if value is None or name not in allowed:
                continue
            if name in _URL_ATTRS and not _safe_url(value):
                continue
            kept.append((name, value))
        return kept

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in _SKIP_CONTENT_TAGS:
            self._skip_depth += 1
            return
        if self._skip_depth or tag not in _ALLOWED_TAGS:
            return
        kept = self._filter_attrs(tag, attrs)
        if tag in _REQUIRES_ATTRS and not kept:
            if tag not in _VOID_TAGS:
                self._suppressed[tag] = self._suppressed.get(tag, 0) + 1
            return
        if tag == "a" and any(name == "href" for name, _ in kept):
            kept.append(("rel", "nofollow"))
        rendered = "".join(f' {name}="{_escape(value)}"' for name, value in kept)
        self.parts.append(f"<{tag}{rendered}>")

    def handle_endtag(self, tag: str) -> None:
        if tag in _SKIP_CONTENT_TAGS:
            if self._skip_depth:
                self._skip_depth -= 1
            return
        if self._skip_depth or tag not in _ALLOWED_TAGS or tag in _VOID_TAGS:
            return
        if self._suppressed.get(tag):
            self._suppressed[tag] -= 1
            return
        self.parts.append(f"</{tag}>")

    def handle_data(self, data: str) -> None:
        if not self._skip_depth:
            self.parts.append(_escape(data))


def sanitize_html(text: str) -> str:
    """Keep only markup that is safe in user-generated content; escape all text."""
    parser = _Sanitizer()
    parser.feed(text)
    parser.close()
    return "".join(parser.parts)


def _string(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _strings(data: Mapping[str, Any], key: str) -> list[str] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"field {key!r} must be a list of strings")
    return list(value)


def _mapping(data: Mapping[str, Any], key: str) -> Mapping[str, Any] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise ValueError(f"field {key!r} must be an object")
    return value


@dataclass
class LocalizedText:
    """A text with a default and per-language variants."""

    default: str = ""
    zh_cn: str = ""
    en_us: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LocalizedText":
        return cls(_string(data, "default"), _string(data, "zh_CN"), _string(data, "en_US"))

    def to_dict(self) -> dict[str, str]:
        return {"default": self.default, "zh_CN": self.zh_cn, "en_US": self.en_us}

    def sanitize(self) -> None:
        self.default = sanitize_html(self.default)
        self.zh_cn = sanitize_html(self.zh_cn)
        self.en_us = sanitize_html(self.en_us)


@dataclass
class Funding:
    open_collective: str = ""
    patreon: str = ""
    github: str = ""
    custom: list[str] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Funding":
        return cls(
            _string(data, "openCollective"),
            _string(data, "patreon"),
            _string(data, "github"),
            _strings(data, "custom"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "openCollective": self.open_collective,
            "patreon": self.patreon,
            "github": self.github,
            "custom": self.custom,
        }


def _optional_dict(value: Any) -> Any:
    return None if value is None else value.to_dict()


@dataclass
class Package:
    """The manifest (``<type>.json``) of a bazaar package."""

    name: str = ""
    author: str = ""
    url: str = ""
    version: str = ""
    min_app_version: str = ""
    backends: list[str] | None = None
    frontends: list[str] | None = None
    display_name: LocalizedText | None = None
    description: LocalizedText | None = None
    readme: LocalizedText | None = None
    funding: Funding | None = None
    keywords: list[str] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Package":
        """Build a package from decoded manifest JSON; raise ValueError on wrong types."""
        if not isinstance(data, Mapping):
            raise ValueError("package manifest must be an object")

        def text(key: str) -> LocalizedText | None:
            value = _mapping(data, key)
            return None if value is None else LocalizedText.from_dict(value)

        funding = _mapping(data, "funding")
        return cls(
            name=_string(data, "name"),
            author=_string(data, "author"),
            url=_string(data, "url"),
            version=_string(data, "version"),
            min_app_version=_string(data, "minAppVersion"),
            backends=_strings(data, "backends"),
            frontends=_strings(data, "frontends"),
            display_name=text("displayName"),
            description=text("description"),
            readme=text("readme"),
            funding=None if funding is None else Funding.from_dict(funding),
            keywords=_strings(data, "keywords"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "author": self.author,
            "url": self.url,
            "version": self.version,
            "minAppVersion": self.min_app_version,
            "backends": self.backends,
            "frontends": self.frontends,
            "displayName": _optional_dict(self.display_name),
            "description": _optional_dict(self.description),
            "readme": _optional_dict(self.readme),
            "funding": _optional_dict(self.funding),
            "keywords": self.keywords,
        }


def sanitize_package(pkg: Package) -> Package:
    """Sanitise the name, author, display name and description of ``pkg`` in place."""
    pkg.name = sanitize_html(pkg.name)
    pkg.author = sanitize_html(pkg.author)
    if pkg.display_name is not None:
        pkg.display_name.sanitize()
    if pkg.description is not None:
        pkg.description.sanitize()
    return pkg


@dataclass
class StageRepo:
    """One repository entry of a stage index."""

    url: str
    updated: str = ""
    stars: int = 0
    open_issues: int = 0
    size: int = 0
    install_size: int = 0
    package: Package | None = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "updated": self.updated,
            "stars": self.stars,
            "openIssues": self.open_issues,
            "size": self.size,
            "installSize": self.install_size,
            "package": _optional_dict(self.package),
        }