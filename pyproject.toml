[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gochain"
version = "0.1.0"
description = "Queueing-network simulations, a prime sieve, Fibonacci chains and coverage-gap search built from connected stages"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "pipeline",
    "stream",
    "queueing",
    "simulation",
    "prime sieve",
    "fibonacci",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
gochain-qnet = "gochain.qnet:main"
gochain-chain-qnet = "gochain.chain_qnet:main"
gochain-fibonacci = "gochain.fibonacci:main"

[tool.hatch.build.targets.wheel]
packages = ["gochain"]

[tool.hatch.build.targets.sdist]
include = ["gochain", "tests", "README.md", "pyproject.toml"]

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
