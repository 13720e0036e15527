import pytest

from bazaar.package import (
    Funding,
    LocalizedText,
    Package,
    StageRepo,
    sanitize_html,
    sanitize_package,
)

FULL_MANIFEST = {
    "name": "plugin-sample",
    "author": "Vanessa",
    "url": "https://example.com/plugin-sample",
    "version": "0.0.1",
    "minAppVersion": "2.9.0",
    "backends": ["windows", "linux"],
    "frontends": ["desktop"],
    "displayName": {"default": "Sample", "zh_CN": "示例", "en_US": "Sample"},
    "description": {"default": "A sample", "zh_CN": "一个示例", "en_US": "A sample"},
    "readme": {"default": "README.md", "zh_CN": "README_zh_CN.md", "en_US": "README_en_US.md"},
    "funding": {"openCollective": "oc", "patreon": "pt", "github": "gh", "custom": ["https://example.com/donate"]},
    "keywords": ["sample", "demo"],
}


def test_plain_text_is_unchanged():
    assert sanitize_html("plugin-sample") == "plugin-sample"


def test_allowed_markup_is_kept():
    assert sanitize_html("<b>bold</b> and <em>it</em>") == "<b>bold</b> and <em>it</em>"


def test_script_is_removed_with_its_content():
    out = sanitize_html("<script>alert(1)</script>hello")
    assert "alert" not in out
    assert "script" not in out
    assert out.endswith("hello")


def test_ampersand_is_escaped():
    assert sanitize_html("a & b") == "a &amp; b"


def test_javascript_link_loses_href_and_tag():
    out = sanitize_html('<a href="javascript:alert(1)">click</a>')
    assert "javascript" not in out
    assert "click" in out
    assert "<a" not in out


def test_safe_link_gets_nofollow():
    out = sanitize_html('<a href="https://example.com/x">x</a>')
    assert 'href="https://example.com/x"' in out
    assert 'rel="nofollow"' in out


def test_event_handler_attributes_are_dropped():
    out = sanitize_html('<p onclick="steal()">text</p>')
    assert "onclick" not in out
    assert "text" in out


@pytest.mark.parametrize(
    "text",
    ["a & b", "<b>x</b><i>y", '<a href="https://example.com">l</a>', "<img src=x onerror=y>", "it's \"q\""],
)
def test_sanitize_is_idempotent(text):
    once = sanitize_html(text)
    assert sanitize_html(once) == once


def test_manifest_round_trip():
    assert Package.from_dict(FULL_MANIFEST).to_dict() == FULL_MANIFEST


def test_missing_fields_take_defaults():
    pkg = Package.from_dict({"name": "only-name", "unknown": 1})
    data = pkg.to_dict()
    assert data["name"] == "only-name"
    assert data["author"] == ""
    assert data["displayName"] is None
    assert data["keywords"] is None
    assert "unknown" not in data


def test_wrong_types_raise():
    with pytest.raises(ValueError):
        Package.from_dict({"name": 3})
    with pytest.raises(ValueError):
        Package.from_dict({"keywords": ["a", 1]})
    with pytest.raises(ValueError):
        Package.from_dict({"displayName": "plain"})
    with pytest.raises(ValueError):
        Package.from_dict(["not", "an", "object"])


def test_sanitize_package_cleans_selected_fields_only():
    pkg = Package(
        name="<script>x</script>name",
        author="<b>author</b>",
        display_name=LocalizedText(default="<style>p{}</style>shown", zh_cn="a & b", en_us="ok"),
        description=None,
        readme=LocalizedText(default="<script>kept</script>"),
        funding=Funding(github="<script>kept</script>"),
    )
    result = sanitize_package(pkg)
    assert result is pkg
    assert pkg.name == "name"
    assert pkg.author == "<b>author</b>"
    assert pkg.display_name.default == "shown"
    assert pkg.display_name.zh_cn == sanitize_html("a & b")
    assert pkg.description is None
    assert pkg.readme.default == "<script>kept</script>"
    assert pkg.funding.github == "<script>kept</script>"


def test_stage_repo_to_dict():
    pkg = Package.from_dict(FULL_MANIFEST)
    repo = StageRepo(
        url="example/plugin-sample@abc",
        updated="2024-01-01T00:00:00Z",
        stars=5,
        open_issues=2,
        size=100,
        install_size=4196,
        package=pkg,
    )
    data = repo.to_dict()
    assert list(data) == ["url", "updated", "stars", "openIssues", "size", "installSize", "package"]
    assert data["openIssues"] == 2
    assert data["installSize"] == 4196
    assert data["package"] == FULL_MANIFEST


def test_stage_repo_without_package():
    assert StageRepo(url="example/x@abc").to_dict()["package"] is None