"""Tests for post field validation."""

import pytest

from soundmap.core.modules.post.validators import clean_optional_text, clean_title, validate_coordinates
from soundmap.errors import ValidationError


class TestCleanTitle:
    """Tests for clean_title function."""

    def test_trimmed(self):
        assert clean_title("  Harbour at dawn ") == "Harbour at dawn"

    @pytest.mark.parametrize("title", ["", "   "])
    def test_blank_rejected(self, title):
        with pytest.raises(ValidationError, match="Title is required"):
            clean_title(title)

    def test_too_long_rejected(self):
        with pytest.raises(ValidationError):
            clean_title("x" * 201)


class TestCleanOptionalText:
    """Tests for clean_optional_text function."""

    def test_blank_becomes_none(self):
        assert clean_optional_text("   ", "Location", 10) is None
        assert clean_optional_text(None, "Location", 10) is None

    def test_too_long_names_field(self):
        with pytest.raises(ValidationError, match="Location"):
            clean_optional_text("x" * 11, "Location", 10)


class TestValidateCoordinates:
    """Tests for validate_coordinates function."""

    @pytest.mark.parametrize(("lat", "lng"), [(None, None), (0, 0), (-90, -180), (90, 180), (51.5, -0.12)])
    def test_valid(self, lat, lng):
        validate_coordinates(lat, lng)

    @pytest.mark.parametrize(("lat", "lng"), [(51.5, None), (None, -0.12)])
    def test_half_pair_rejected(self, lat, lng):
        with pytest.raises(ValidationError, match="together"):
            validate_coordinates(lat, lng)

    @pytest.mark.parametrize(("lat", "lng"), [(90.1, 0), (-91, 0), (0, 180.5), (0, -181)])
    def test_out_of_range_rejected(self, lat, lng):
        with pytest.raises(ValidationError):
            validate_coordinates(lat, lng)
