[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ossim"
version = "0.1.0"
description = "Simulators for classic operating-system algorithms: a two-pass linker, CPU scheduling, page replacement and disk I/O scheduling"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "operating-systems",
    "simulation",
    "scheduling",
    "paging",
    "page-replacement",
    "linker",
    "disk-scheduling",
    "education",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: System :: Operating System",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
ossim-link = "ossim.linker:main"
ossim-sched = "ossim.cpusim:main"
ossim-mmu = "ossim.mmu:main"
ossim-iosched = "ossim.iosim:main"

[tool.hatch.build.targets.wheel]
packages = ["ossim"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
