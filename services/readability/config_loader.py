# services/readability/config_loader.py
"""
Loads named option profiles from ``configs/readability.yaml`` and validates
them with the ``ReadabilityOptions`` Pydantic model.  The file can contain a
top-level ``profiles`` key or just the mapping of profile names -> options.

Public API:
* ``get_profile_options(name, **overrides)``: returns validated
  ``ReadabilityOptions`` or raises ``ProfileNotFoundError``.
* ``list_available_profiles()``: convenience helper for the CLI.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel

from models.options import ReadabilityOptions

from .errors import ProfileNotFoundError


class ProfileCatalogue(BaseModel):
    """Top-level container: maps profile name -> its options."""
    profiles: Dict[str, ReadabilityOptions]


# ----------------------------------------------------------------------
# Internal helpers & caching
# ----------------------------------------------------------------------
# Resolve the path relative to this file (two levels up -> project root)
CONFIG_PATH = (
    Path(__file__).resolve().parents[2] / "configs" / "readability.yaml"
)

# Read/validate the default file only once per process
_cached_catalogue: Optional[ProfileCatalogue] = None


def _load_yaml(path: Path) -> dict:
    """Read the YAML file and return the inner ``profiles`` mapping."""
    with path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    profiles = raw.get("profiles", raw)
    # An empty profile (``strict:`` with nothing under it) means "defaults".
    return {name: (values or {}) for name, values in profiles.items()}


def load_profiles(path: Optional[Path] = None) -> ProfileCatalogue:
    """
    Parse and validate a profile file.  Any unknown option or bad value
    raises ``ValidationError`` naming the offending field.

    Without ``path`` the bundled file is used and the result cached.
    """
    global _cached_catalogue
    if path is not None:
        return ProfileCatalogue(profiles=_load_yaml(Path(path)))
    if _cached_catalogue is None:
        _cached_catalogue = ProfileCatalogue(profiles=_load_yaml(CONFIG_PATH))
    return _cached_catalogue


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------
def get_profile_options(
    profile_name: str,
    path: Optional[Path] = None,
    **overrides: Any,
) -> ReadabilityOptions:
    """
    Return the **validated** options of ``profile_name``, with ``overrides``
    merged on top.

    Raises
    ------
    ProfileNotFoundError
        If the profile name is not present in the YAML.
    ValidationError
        If the YAML or an override does not conform to ``ReadabilityOptions``.
    """
    catalogue = load_profiles(path)
    try:
        options = catalogue.profiles[profile_name]
    except KeyError as exc:
        raise ProfileNotFoundError(profile_name) from exc
    return ReadabilityOptions.merged(options, overrides)


def list_available_profiles(path: Optional[Path] = None) -> List[str]:
    """Convenient helper for the CLI: returns all profile identifiers."""
    return list(load_profiles(path).profiles.keys())
