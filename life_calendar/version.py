"""Package version, read from pyproject.toml in a source checkout.

Installed wheels carry no pyproject.toml, so the distribution metadata
is used instead.
"""

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION_NAME = "life-calendar"

_PYPROJECT_PATH = Path(__file__).resolve().parent.parent / "pyproject.toml"


def get_version() -> str:
    """Return the life-calendar version string."""
    if _PYPROJECT_PATH.exists():
        with open(_PYPROJECT_PATH, "rb") as f:
            data = tomllib.load(f)
        return data["project"]["version"]
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return "unknown"


__version__: str = get_version()
