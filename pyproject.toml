[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chatgate"
version = "0.1.0"
description = "HTTP gateway, chat-server selection and pooled Redis store for a chat backend"
requires-python = ">=3.10"
dependencies = [
    "redis",
]
keywords = ["chat", "gateway", "http", "redis", "connection-pool", "load-balancing"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Communications :: Chat",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
chatgate = "chatgate.http_server:main"

[tool.hatch.build.targets.wheel]
packages = ["chatgate"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
