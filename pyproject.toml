[build-system]
requires = ["hatchling>=1.18"]
build-backend = "hatchling.build"

[project]
name = "tourism-api"
version = "0.1.0"
description = "HTTP backend for a tourism destination catalogue with accounts, profiles and reviews"
requires-python = ">=3.10"
keywords = ["tourism", "destinations", "reviews", "rest", "flask", "jwt", "sqlalchemy"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
]
dependencies = [
    "flask>=2.3",
    "sqlalchemy>=2.0",
    "pyjwt>=2.8",
    "bcrypt>=4.0",
    "requests>=2.31",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
]

[project.scripts]
tourism-api = "tourism_api.app:main"

[tool.hatch.build.targets.wheel]
packages = ["tourism_api"]

[tool.hatch.build.targets.sdist]
include = ["tourism_api", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
