[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "openindex"
version = "0.1.0"
description = "Client SDK for the Open-Index on-chain protocol: PDA derivation, instruction encoding and transaction building"
requires-python = ">=3.10"
keywords = ["solana", "index", "pda", "borsh", "transactions", "sdk"]
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
    "Topic :: Software Development :: Libraries",
]
dependencies = [
    "pynacl",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["openindex"]

[tool.hatch.build.targets.sdist]
include = ["openindex", "tests"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
