[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "claudeup"
version = "0.1.0"
description = "Inspect, diagnose and maintain Claude Code plugins, marketplaces and MCP server settings"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "claude",
    "claude-code",
    "plugins",
    "marketplaces",
    "mcp",
    "cli",
    "diagnostics",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
claudeup = "claudeup.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["claudeup"]

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
warn_unused_ignores = true
warn_redundant_casts = true
