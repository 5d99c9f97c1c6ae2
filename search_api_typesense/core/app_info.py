"""
Utility to read app info from pyproject.toml
"""

import importlib.metadata
import os
import tomllib as toml

DISTRIBUTION_NAME = "search-api-typesense"


def get_app_info():
    """
    Reads pyproject.toml and returns a dictionary with app info.

    When running from an installed wheel there is no pyproject.toml next to
    the package, so the distribution metadata is used instead.
    """
    current_dir = os.path.dirname(os.path.abspath(__file__))
    pyproject_path = os.path.join(current_dir, "..", "..", "pyproject.toml")

    if os.path.exists(pyproject_path):
        try:
            with open(pyproject_path, "rb") as f:
                project_data = toml.load(f).get("project", {})
            return {
                "name": project_data.get("name", DISTRIBUTION_NAME),
                "version": project_data.get("version", "0.0.0"),
                "description": project_data.get("description", "Search API Typesense"),
            }
        except (OSError, toml.TOMLDecodeError):
            pass

    try:
        version = importlib.metadata.version(DISTRIBUTION_NAME)
    except (ImportError, importlib.metadata.PackageNotFoundError) as e:
        version = f"unknown (error: {e.__class__.__name__})"

    return {"name": DISTRIBUTION_NAME, "version": version, "description": "Search API Typesense"}


_app_info = get_app_info()


def get_app_name() -> str:
    """Get app name"""
    return _app_info["name"]


def get_app_version() -> str:
    """Get app version"""
    return _app_info["version"]


def get_app_description() -> str:
    """Get app description"""
    return _app_info["description"]
