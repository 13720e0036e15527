[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bazaar"
version = "1.0.0"
description = "Tools that stage, index and check community marketplace packages (themes, templates, icons, widgets, plugins)"
requires-python = ">=3.10"
keywords = ["bazaar", "marketplace", "packages", "github", "releases", "staging"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]
dependencies = [
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[project.scripts]
bazaar-stage = "bazaar.stage:main"
bazaar-index = "bazaar.index:main"
bazaar-hash = "bazaar.hash:main"

[tool.hatch.build.targets.wheel]
packages = ["bazaar"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
