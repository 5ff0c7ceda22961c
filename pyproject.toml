[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kafkalite"
version = "0.1.0"
description = "A small in-process message broker with topics, hashed partitions and append-only partition logs"
requires-python = ">=3.10"
dependencies = []
keywords = ["broker", "message-queue", "partitions", "producer", "log", "batching"]
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
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
kafkalite-broker = "kafkalite.cli_broker:main"
kafkalite-producer = "kafkalite.cli_producer:main"

[tool.hatch.build.targets.wheel]
packages = ["kafkalite"]

[tool.pytest.ini_options]
addopts = "-ra"
