# bazaar

Maintenance tools for a community marketplace of themes, templates, icons,
widgets and plugins, each of which lives in its own GitHub repository.

The package covers three jobs:

- **staging**: for each listed repository, find the latest release that ships
  a `package.zip`, measure its download and unpacked size, copy the package
  and its metadata files to object storage, gather star and open-issue counts,
  and write a stage index per resource type, newest release first;
- **indexing**: copy the stage indexes of the current commit to object storage;
- **hashing**: report the current commit hash to the marketplace service.

It also contains the data model and name-validation rules for checking
submitted repositories.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Commands

All commands log to standard output and exit with status 1 on failure.

### `bazaar-stage [--dir DIR]`

Reads `themes.json`, `templates.json`, `icons.json`, `widgets.json` and
`plugins.json` from `DIR` (default: the current directory), each holding a
`"repos"` list of `owner/name` entries, and writes `DIR/stage/<type>.json`
for each. The `stage` directory must already exist.

For every repository it:

- looks up the latest release and the commit its tag points to; repositories
  without a release or without a `package.zip` asset are left out;
- uploads `package.zip` under `package/<owner>/<name>@<hash>`;
- uploads `README.md`, `README_zh_CN.md`, `README_en_US.md`, `preview.png`,
  `icon.png` and the `<type>.json` manifest (with `size` and `installSize`
  added) under `package/<owner>/<name>@<hash>/<file>`;
- records the release time, stars, open issues, sizes and the sanitised
  manifest in the stage entry.

Environment:

- `PAT`: GitHub access token used for API requests;
- `QINIU_BUCKET`, `QINIU_AK`, `QINIU_SK`: object-storage bucket and keys.

Objects that already exist in the bucket are not uploaded again.

### `bazaar-index`

Reads the current commit with `git rev-parse HEAD`, fetches
`stage/<type>.json` at that commit from the repository named by
`GITHUB_REPOSITORY` (`owner/name`), and uploads each under
`bazaar@<hash>/stage/<type>.json`. Uses the same storage variables as above.

### `bazaar-hash`

Reads the current commit with `git rev-parse HEAD` and posts it as JSON,
together with the `RHYTHEM_TOKEN` environment variable, to the URL given in
`BAZAAR_HASH_URL`.

## Library use

```python
from bazaar.naming import is_valid_name, build_repo_home_url
from bazaar.oss import size_of_directory

is_valid_name("theme-sample")   # True
is_valid_name("CON")            # False: reserved on Windows
is_valid_name(" leading")       # False
build_repo_home_url("owner", "repo")   # "https://github.com/owner/repo"

size_of_directory("some/dir")   # files' sizes plus 4096 per directory
```

Modules:

- `bazaar.checkresult`: the check-result model (`CheckResult`, `Icon`,
  `Plugin`, `Template`, `Theme`, `Widget` and their parts) and `to_json`,
  which serialises it with the report's JSON keys (`pass`, `repo`,
  `icon.json`, ...); `CheckResult.to_dict()` gives the same as a dictionary.
- `bazaar.example`: `check_result_example()` builds a sample `CheckResult`
  with one passing and one failing entry per resource kind.
- `bazaar.naming`: `is_valid_name` and the `build_file_raw_url`,
  `build_file_preview_url` and `build_repo_home_url` helpers.
- `bazaar.package`: the manifest model (`Package`, `LocalizedText`,
  `Funding`, `StageRepo`), `sanitize_html`, and `sanitize_package`, which
  strips unsafe HTML from the name, author, display name and description.
- `bazaar.github`: `get_repo_latest_release` and `repo_stats`.
- `bazaar.oss`: `QiniuCredentials`, `upload_oss`, `make_upload_token`,
  `encoded_entry` and `size_of_directory`.
- `bazaar.web`: `http_get` and `http_post_json` with retries on transport
  and server errors.
- `bazaar.stage`, `bazaar.index`, `bazaar.hash`: the functions behind the
  commands, such as `perform_stage`, `index_package`, `stage_index`,
  `git_head_hash` and `report_hash`.

## What it does not do

There is no command that checks submitted repositories: the package holds
the result model, the sample result and the name rules, but nothing that
fills a `CheckResult` from a repository or renders the result report.