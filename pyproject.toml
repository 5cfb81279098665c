[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "datree"
version = "1.0.0"
description = "Building blocks for checking Kubernetes manifests: JSON Schema validation with resource-aware custom keywords, report rendering, local configuration and a small HTTP client."
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
    "jsonschema",
]
keywords = [
    "kubernetes",
    "policy",
    "json-schema",
    "yaml",
    "validation",
    "misconfiguration",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Quality Assurance",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["datree"]

[tool.hatch.build.targets.sdist]
include = [
    "datree",
    "tests",
]

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
