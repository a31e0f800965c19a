[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xoauth2sasl"
version = "0.1.0"
description = "The XOAUTH2 SASL mechanism, client and server side, in pure Python"
requires-python = ">=3.10"
dependencies = []
keywords = ["sasl", "xoauth2", "oauth2", "bearer", "authentication", "imap", "smtp"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration :: Authentication/Directory",
    "Topic :: Communications :: Email",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["xoauth2sasl"]

[tool.hatch.build.targets.sdist]
include = ["xoauth2sasl", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
strict = true
