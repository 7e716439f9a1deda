"""
Version information for the in-memory cache package.

The package version is read from the installed distribution metadata, falling
back to pyproject.toml when running from a source checkout.
"""

try:
    from importlib.metadata import version

    __version__ = version("inmemory-cache")
except Exception:
    # Fallback for development (package not installed)
    import tomllib
    from pathlib import Path

    try:
        pyproject_path = Path(__file__).parent.parent / "pyproject.toml"
        with open(pyproject_path, "rb") as f:
            __version__ = tomllib.load(f)["project"]["version"]
    except Exception:
        __version__ = "0.0.0-dev"
