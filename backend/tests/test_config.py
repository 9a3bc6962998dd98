"""
Tests for application settings.
"""

from pathlib import Path

from sfcc_metadata.config import Settings


class TestSettings:
    """Tests for Settings validators."""

    def test_ocapi_version_normalized(self):
        assert Settings(ocapi_version="20.4").ocapi_version == "v20_4"
        assert Settings(ocapi_version="v21_3").ocapi_version == "v21_3"

    def test_cors_origins_from_string(self):
        settings = Settings(cors_origins="http://a.example, http://b.example")
        assert settings.cors_origins == ["http://a.example", "http://b.example"]

    def test_dw_json_path(self):
        assert Settings(dw_json_path="/tmp/dw.json").dw_json_path == Path("/tmp/dw.json")

    def test_defaults(self):
        settings = Settings()

        assert settings.attribute_page_size == 700
        assert settings.attribute_group_page_size == 150
        assert settings.site_preference_instance_type == "sandbox"
