[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "poolkit"
version = "0.1.0"
description = "A simulated memory pool, a file-backed allocation leak tracker and a bounded worker thread pool"
requires-python = ">=3.10"
dependencies = []
keywords = ["memory pool", "allocator", "leak detection", "thread pool", "worker queue", "benchmark"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
poolkit-mempool = "poolkit.mempool:main"
poolkit-leakcheck = "poolkit.leakcheck:main"
poolkit-bench = "poolkit.bench:main"

[tool.hatch.build.targets.wheel]
packages = ["poolkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
