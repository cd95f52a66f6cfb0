[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "minipysh"
version = "0.1.0"
description = "A small interactive shell with pipes, redirections, heredocs and variable expansion"
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "pipeline", "redirection", "heredoc", "interpreter"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Shells",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
minipysh = "minipysh.shell:main"

[tool.hatch.build.targets.wheel]
packages = ["minipysh"]

[tool.pytest.ini_options]
addopts = "-ra"
