[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ethrpc-types"
version = "0.1.0"
description = "Typed Python models for Ethereum JSON-RPC requests and responses"
requires-python = ">=3.10"
dependencies = []
keywords = ["ethereum", "json-rpc", "web3", "blocks", "transactions", "traces"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ethrpc_types"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
