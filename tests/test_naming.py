import pytest

from bazaar.naming import (
    build_file_preview_url,
    build_file_raw_url,
    build_repo_home_url,
    is_valid_name,
)

HASH = "95e07499bd1e0880155134628aacc4d07da419aa"


@pytest.mark.parametrize(
    "name",
    ["icon-sample", "plugin-sample", "ab", "a b", "a.b", "COM10", "console", "x_y-z.1"],
)
def test_valid_names(name):
    assert is_valid_name(name) is True


@pytest.mark.parametrize(
    "name",
    [
        "",
        "a",
        ".hidden",
        "trailing.",
        " leading",
        "trailing ",
        "a/b",
        "a\\b",
        "a:b",
        "a*b",
        "a?b",
        'a"b',
        "a<b",
        "a>b",
        "a|b",
        "名字",
        "tab\tname",
        "line\n",
    ],
)
def test_invalid_names(name):
    assert is_valid_name(name) is False


@pytest.mark.parametrize("name", ["CON", "con", "Prn", "aux", "NUL", "COM0", "com9", "LPT1", "lpt9"])
def test_reserved_words_are_invalid(name):
    assert is_valid_name(name) is False


def test_preview_url():
    assert (
        build_file_preview_url("siyuan-note", "icon-sample", HASH, "icon.json")
        == "https://github.com/siyuan-note/icon-sample/blob/95e07499bd1e0880155134628aacc4d07da419aa/icon.json"
    )


def test_raw_url():
    assert (
        build_file_raw_url("siyuan-note", "icon-sample", HASH, "README.md")
        == "https://raw.githubusercontent.com/siyuan-note/icon-sample/95e07499bd1e0880155134628aacc4d07da419aa/README.md"
    )


def test_home_url():
    assert build_repo_home_url("siyuan-note", "icon-sample") == "https://github.com/siyuan-note/icon-sample"


def test_preview_url_extends_home_url():
    home = build_repo_home_url("owner", "repo")
    assert build_file_preview_url("owner", "repo", "h", "f.png") == home + "/blob/h/f.png"