"""A sample check result holding one passing and one failing entry per resource kind."""

from __future__ import annotations

from bazaar.checkresult import (
    ICON_JSON,
    ICON_PNG,
    PLUGIN_JSON,
    PREVIEW_PNG,
    README_MD,
    TEMPLATE_JSON,
    THEME_JSON,
    WIDGET_JSON,
    Attr,
    Attrs,
    CheckResult,
    File,
    Icon,
    IconFiles,
    LatestRelease,
    Name,
    PackageZip,
    Plugin,
    PluginFiles,
    Release,
    RepoInfo,
    Template,
    TemplateFiles,
    Theme,
    ThemeFiles,
    Widget,
    WidgetFiles,
)
from bazaar.naming import build_file_preview_url, build_repo_home_url

OWNER = "example"
RELEASE_TAG = "v0.0.1"
VERSION = "0.0.1"
AUTHOR = "Example Author"


def _repo(repo_name: str) -> RepoInfo:
    return RepoInfo(path=f"{OWNER}/{repo_name}", home=build_repo_home_url(OWNER, repo_name))


def _passing(entry_cls, files_cls, repo_name, manifest_field, manifest_file, commit, name_exists=True):
    repo = _repo(repo_name)

    def found(path: str) -> File:
        return File(passed=True, url=build_file_preview_url(OWNER, repo_name, commit, path))

    files = files_cls(
        passed=True,
        icon_png=found(ICON_PNG),
        preview_png=found(PREVIEW_PNG),
        readme_md=found(README_MD),
        **{manifest_field: found(manifest_file)},
    )
    release = Release(
        passed=True,
        latest_release=LatestRelease(
            passed=True,
            url=f"{repo.home}/releases/tag/{RELEASE_TAG}",
            package_zip=PackageZip(
                passed=True,
                url=f"{repo.home}/releases/download/{RELEASE_TAG}/package.zip",
            ),
        ),
    )
    attrs = Attrs(
        passed=True,
        name=Name(passed=True, value=repo_name, exist=name_exists, valid=True, unique=True),
        version=Attr(passed=True, value=VERSION),
        author=Attr(passed=True, value=AUTHOR),
        url=Attr(passed=True, value=repo.home),
    )
    return entry_cls(repo_info=repo, release=release, files=files, attrs=attrs)


def _failing(entry_cls, files_cls, repo_name):
    return entry_cls(repo_info=_repo(repo_name), files=files_cls())


def check_result_example() -> CheckResult:
    """Build a fresh sample result covering every resource kind."""
    return CheckResult(
        icons=[
            _passing(Icon, IconFiles, "icon-sample", "icon_json", ICON_JSON,
                     "95e07499bd1e0880155134628aacc4d07da419aa"),
            _failing(Icon, IconFiles, "icon-sample"),
        ],
        plugins=[
            _passing(Plugin, PluginFiles, "plugin-sample", "plugin_json", PLUGIN_JSON,
                     "979f77bbeec0bc9d123305a7e18d1936ae67b009"),
            _failing(Plugin, PluginFiles, "plugin-sample"),
        ],
        templates=[
            _passing(Template, TemplateFiles, "template-sample", "template_json", TEMPLATE_JSON,
                     "280b81c2ca51c2fccb65662a56c02fc2fb050a9d", name_exists=False),
            _failing(Template, TemplateFiles, "template-sample"),
        ],
        themes=[
            _passing(Theme, ThemeFiles, "theme-sample", "theme_json", THEME_JSON,
                     "14665b04a381b8265ed27e5a4ad0156e7c0c05cc"),
            _failing(Theme, ThemeFiles, "theme-sample"),
        ],
        widgets=[
            _passing(Widget, WidgetFiles, "widget-sample", "widget_json", WIDGET_JSON,
                     "272314c056116dc32afbe61c85d541a509157948"),
            _failing(Widget, WidgetFiles, "widget-sample"),
        ],
    )