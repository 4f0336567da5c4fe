[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jiraflow"
version = "0.1.0"
description = "Terminal UI that lists your open Jira tickets and checks out a git branch for the one you pick"
requires-python = ">=3.10"
keywords = ["jira", "git", "branch", "terminal", "tui", "curses", "workflow"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console :: Curses",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Operating System :: MacOS",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Version Control :: Git",
    "Topic :: Software Development :: Bug Tracking",
]
dependencies = [
    "requests>=2.28",
    "platformdirs>=3.0",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[project.scripts]
jiraflow = "jiraflow.app:main"

[tool.hatch.build.targets.wheel]
packages = ["jiraflow"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
