# tests/test_config_loader.py
"""
Tests for the Pydantic-based ``services.readability.config_loader`` module.

Profiles come back as validated ``ReadabilityOptions`` models, so the tests
use attribute access (e.g. ``options.min_text_length``).
"""

import pytest
from pydantic import ValidationError

from models.options import ReadabilityOptions
from services.readability.config_loader import (
    ProfileNotFoundError,
    get_profile_options,
    list_available_profiles,
    load_profiles,
)


# ----------------------------------------------------------------------
# Bundled profiles
# ----------------------------------------------------------------------
def test_bundled_profiles_are_listed():
    names = list_available_profiles()
    assert {"default", "strict", "permissive", "rich"} <= set(names)


def test_default_profile_is_the_stock_configuration():
    assert get_profile_options("default") == ReadabilityOptions()


def test_strict_profile_values():
    options = get_profile_options("strict")
    assert options.min_text_length == 50
    assert (options.min_image_width, options.min_image_height) == (300, 200)
    assert options.ignore_image_format == ["gif", "svg"]


@pytest.mark.parametrize("profile_name", ["default", "strict", "permissive", "rich"])
def test_every_profile_validates(profile_name):
    assert isinstance(get_profile_options(profile_name), ReadabilityOptions)


def test_overrides_are_merged_over_the_profile():
    options = get_profile_options("strict", debug=True)
    assert options.debug is True
    assert options.min_text_length == 50


# ----------------------------------------------------------------------
# Unknown profile must raise the domain-specific error.
# ----------------------------------------------------------------------
def test_unknown_profile_raises_custom_error():
    unknown_name = "this_profile_does_not_exist_12345"
    with pytest.raises(ProfileNotFoundError) as exc_info:
        get_profile_options(unknown_name)

    # The error message should contain the missing name for easier debugging.
    assert unknown_name in str(exc_info.value)
    assert isinstance(exc_info.value, KeyError)


# ----------------------------------------------------------------------
# Custom files
# ----------------------------------------------------------------------
def test_file_without_profiles_key(tmp_path):
    path = tmp_path / "profiles.yaml"
    path.write_text("tiny:\n  min_text_length: 5\nbare:\n", encoding="utf-8")

    catalogue = load_profiles(path)
    assert catalogue.profiles["tiny"].min_text_length == 5
    assert catalogue.profiles["bare"] == ReadabilityOptions()
    assert get_profile_options("tiny", path=path, debug=True).debug is True


def test_invalid_option_in_file_is_reported(tmp_path):
    path = tmp_path / "profiles.yaml"
    path.write_text("profiles:\n  broken:\n    min_text_lenght: 5\n", encoding="utf-8")

    with pytest.raises(ValidationError) as exc_info:
        load_profiles(path)
    assert "min_text_lenght" in str(exc_info.value)
