[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ordersapi"
version = "0.1.0"
description = "A small HTTP service for creating, listing, updating and deleting orders stored in Redis"
requires-python = ">=3.10"
keywords = ["orders", "rest", "http", "redis", "flask"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "flask>=2.2",
    "werkzeug>=2.2",
    "redis>=4.5",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
ordersapi = "ordersapi.app:main"

[tool.hatch.build.targets.wheel]
packages = ["ordersapi"]

[tool.pytest.ini_options]
addopts = "-ra"
