[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xvtools"
version = "0.1.0"
description = "Userland tools and kernel building blocks of a small teaching Unix, as a Python library"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "unix",
    "teaching",
    "shell",
    "grep",
    "virtual-memory",
    "page-table",
    "malloc",
    "virtio",
    "risc-v",
]
classifiers = [
    "Development Status :: 4 - Beta",
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
xv-grep = "xvtools.grep:main"
xv-cat = "xvtools.coreutils:cat_main"
xv-echo = "xvtools.coreutils:echo_main"
xv-wc = "xvtools.coreutils:wc_main"
xv-ls = "xvtools.coreutils:ls_main"
xv-mkdir = "xvtools.coreutils:mkdir_main"
xv-rm = "xvtools.coreutils:rm_main"
xv-ln = "xvtools.coreutils:ln_main"
xv-kill = "xvtools.coreutils:kill_main"
xv-cpubench = "xvtools.bench:cpubench_main"
xv-iobench = "xvtools.bench:iobench_main"

[tool.hatch.build.targets.wheel]
packages = ["xvtools"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
