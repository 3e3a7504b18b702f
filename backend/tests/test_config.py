"""
EduMate Backend — Settings Tests
==================================

What:  Validation rules of the pydantic Settings object.
"""

import pytest
from pydantic import ValidationError

from edumate.config import Settings


class TestSettings:

    def test_log_level_is_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings(log_level="CHATTY")

    def test_cors_origins_list(self):
        settings = Settings(cors_origins="http://a.test, http://b.test,,")
        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]

    @pytest.mark.parametrize("key", ["", "YOUR_GEMINI_API_KEY_HERE", "your_gemini_api_key_here"])
    def test_unusable_key_fails_startup_validation(self, key):
        settings = Settings(gemini_api_key=key)

        assert settings.gemini_configured is False
        with pytest.raises(ValueError, match="GEMINI_API_KEY is not set"):
            settings.validate_required_for_production()

    def test_real_key_passes_startup_validation(self):
        settings = Settings(gemini_api_key="AIza-real-looking-key")

        assert settings.gemini_configured is True
        settings.validate_required_for_production()

    def test_default_timeouts(self):
        settings = Settings()
        assert settings.gemini_connect_timeout == 30.0
        assert settings.gemini_request_timeout == 120.0
