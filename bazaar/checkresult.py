"""Result records of checking bazaar resource repositories."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, is_dataclass
from enum import IntEnum
from typing import Any


class ResourceType(IntEnum):
    """Kinds of bazaar resources."""

    ICONS = 0
    PLUGINS = 1
    TEMPLATES = 2
    THEMES = 3
    WIDGETS = 4


CHECK_RESULT_TEMPLATE_PATH = "./templates/check-result.md.tpl"

ICON_PNG = "icon.png"
PREVIEW_PNG = "preview.png"
README_MD = "README.md"

ICON_JSON = "icon.json"
PLUGIN_JSON = "plugin.json"
TEMPLATE_JSON = "template.json"
THEME_JSON = "theme.json"
WIDGET_JSON = "widget.json"

MANIFEST_FILES = {
    ResourceType.ICONS: ICON_JSON,
    ResourceType.PLUGINS: PLUGIN_JSON,
    ResourceType.TEMPLATES: TEMPLATE_JSON,
    ResourceType.THEMES: THEME_JSON,
    ResourceType.WIDGETS: WIDGET_JSON,
}


def _named(json_name: str, **kwargs: Any) -> Any:
    return field(metadata={"json": json_name}, **kwargs)


def _plain(obj: Any) -> Any:
    if is_dataclass(obj) and not isinstance(obj, type):
        return {f.metadata.get("json", f.name): _plain(getattr(obj, f.name)) for f in fields(obj)}
    if isinstance(obj, (list, tuple)):
        return [_plain(item) for item in obj]
    return obj


def to_json(obj: Any) -> str:
    """Serialise a check record compactly, using the report's field names."""
    return json.dumps(_plain(obj), ensure_ascii=False, separators=(",", ":"))


@dataclass
class File:
    passed: bool = _named("pass", default=False)
    url: str = ""


@dataclass
class PackageZip:
    passed: bool = _named("pass", default=False)
    url: str = ""


@dataclass
class LatestRelease:
    passed: bool = _named("pass", default=False)
    url: str = ""
    tag: str = ""
    hash: str = ""
    package_zip: PackageZip = field(default_factory=PackageZip)


@dataclass
class Release:
    passed: bool = _named("pass", default=False)
    latest_release: LatestRelease = field(default_factory=LatestRelease)


@dataclass
class RepoInfo:
    owner: str = ""
    name: str = ""
    path: str = ""
    home: str = ""


@dataclass
class Attr:
    passed: bool = _named("pass", default=False)
    value: str = ""


@dataclass
class Name:
    passed: bool = _named("pass", default=False)
    value: str = ""
    exist: bool = False
    valid: bool = False
    unique: bool = False


@dataclass
class Attrs:
    passed: bool = _named("pass", default=False)
    name: Name = field(default_factory=Name)
    version: Attr = field(default_factory=Attr)
    author: Attr = field(default_factory=Attr)
    url: Attr = field(default_factory=Attr)


@dataclass
class IconFiles:
    passed: bool = _named("pass", default=False)
    icon_json: File = _named(ICON_JSON, default_factory=File)
    icon_png: File = _named(ICON_PNG, default_factory=File)
    preview_png: File = _named(PREVIEW_PNG, default_factory=File)
    readme_md: File = _named(README_MD, default_factory=File)


@dataclass
class PluginFiles:
    passed: bool = _named("pass", default=False)
    plugin_json: File = _named(PLUGIN_JSON, default_factory=File)
    icon_png: File = _named(ICON_PNG, default_factory=File)
    preview_png: File = _named(PREVIEW_PNG, default_factory=File)
    readme_md: File = _named(README_MD, default_factory=File)


@dataclass
class TemplateFiles:
    passed: bool = _named("pass", default=False)
    template_json: File = _named(TEMPLATE_JSON, default_factory=File)
    icon_png: File = _named(ICON_PNG, default_factory=File)
    preview_png: File = _named(PREVIEW_PNG, default_factory=File)
    readme_md: File = _named(README_MD, default_factory=File)


@dataclass
class ThemeFiles:
    passed: bool = _named("pass", default=False)
    theme_json: File = _named(THEME_JSON, default_factory=File)
    icon_png: File = _named(ICON_PNG, default_factory=File)
    preview_png: File = _named(PREVIEW_PNG, default_factory=File)
    readme_md: File = _named(README_MD, default_factory=File)


@dataclass
class WidgetFiles:
    passed: bool = _named("pass", default=False)
    widget_json: File = _named(WIDGET_JSON, default_factory=File)
    icon_png: File = _named(ICON_PNG, default_factory=File)
    preview_png: File = _named(PREVIEW_PNG, default_factory=File)
    readme_md: File = _named(README_MD, default_factory=File)


@dataclass
class Icon:
    repo_info: RepoInfo = _named("repo", default_factory=RepoInfo)
    release: Release = field(default_factory=Release)
    files: IconFiles = field(default_factory=IconFiles)
    attrs: Attrs = field(default_factory=Attrs)


@dataclass
class Plugin:
    repo_info: RepoInfo = _named("repo", default_factory=RepoInfo)
    release: Release = field(default_factory=Release)
    files: PluginFiles = field(default_factory=PluginFiles)
    attrs: Attrs = field(default_factory=Attrs)


@dataclass
class Template:
    repo_info: RepoInfo = _named("repo", default_factory=RepoInfo)
    release: Release = field(default_factory=Release)
    files: TemplateFiles = field(default_factory=TemplateFiles)
    attrs: Attrs = field(default_factory=Attrs)


@dataclass
class Theme:
    repo_info: RepoInfo = _named("repo", default_factory=RepoInfo)
    release: Release = field(default_factory=Release)
    files: ThemeFiles = field(default_factory=ThemeFiles)
    attrs: Attrs = field(default_factory=Attrs)


@dataclass
class Widget:
    repo_info: RepoInfo = _named("repo", default_factory=RepoInfo)
    release: Release = field(default_factory=Release)
    files: WidgetFiles = field(default_factory=WidgetFiles)
    attrs: Attrs = field(default_factory=Attrs)


@dataclass
class CheckResult:
    """Check outcome for every kind of resource."""

    icons: list[Icon] = field(default_factory=list)
    plugins: list[Plugin] = field(default_factory=list)
    templates: list[Template] = field(default_factory=list)
    themes: list[Theme] = field(default_factory=list)
    widgets: list[Widget] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Plain dictionary with the report's field names."""
        return _plain(self)