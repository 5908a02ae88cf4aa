[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "servercore"
version = "0.1.0"
description = "Server core toolkit: deadlock-detecting locks, thread manager, pooled memory blocks, timers and an asynchronous file logger"
requires-python = ">=3.10"
dependencies = []
keywords = ["server", "deadlock", "lock", "memory pool", "logging", "threads", "timer"]
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
    "Topic :: Software Development :: Libraries :: Application Frameworks",
    "Topic :: System :: Logging",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
servercore-demo = "servercore.gameserver:main"

[tool.hatch.build.targets.wheel]
packages = ["servercore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
