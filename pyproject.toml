[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "banking"
version = "0.1.0"
description = "A small banking REST service for customers, accounts and transactions backed by MySQL."
requires-python = ">=3.10"
keywords = ["banking", "accounts", "transactions", "rest", "flask", "mysql"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Office/Business :: Financial :: Accounting",
]
dependencies = [
    "flask>=2.2",
    "python-dotenv>=1.0",
    "pymysql>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
banking = "banking.web:main"

[tool.hatch.build.targets.wheel]
packages = ["banking"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
