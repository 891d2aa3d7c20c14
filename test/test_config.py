import os
import unittest
from unittest import mock

from pydantic import ValidationError

from config import EngineSettings, McpSettings, Settings


class EngineSettingsTests(unittest.TestCase):
    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = EngineSettings(_env_file=None)

        self.assertEqual(settings.api_url, "https://api.sscmfi.com/api/sscmfiMCPAPI")
        self.assertEqual(settings.payload_shape, "flat")
        self.assertIsNone(settings.timeout_seconds)

    def test_environment_overrides(self):
        env = {
            "SSCMFI_API_URL": "http://localhost:9000/calc",
            "SSCMFI_PAYLOAD_SHAPE": "nested",
            "SSCMFI_TIMEOUT_SECONDS": "2.5",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            settings = EngineSettings(_env_file=None)

        self.assertEqual(settings.api_url, "http://localhost:9000/calc")
        self.assertEqual(settings.payload_shape, "nested")
        self.assertEqual(settings.timeout_seconds, 2.5)

    def test_unknown_payload_shape_is_rejected(self):
        with mock.patch.dict(os.environ, {"SSCMFI_PAYLOAD_SHAPE": "xml"}, clear=True):
            with self.assertRaises(ValidationError):
                EngineSettings(_env_file=None)

    def test_combined_settings_log_level(self):
        with mock.patch.dict(os.environ, {"MCP_LOG_LEVEL": "debug"}, clear=True):
            settings = Settings(_env_file=None)

        self.assertEqual(settings.mcp.log_level, "DEBUG")

    def test_unknown_log_level_is_rejected(self):
        with mock.patch.dict(os.environ, {"MCP_LOG_LEVEL": "verbose"}, clear=True):
            with self.assertRaises(ValidationError):
                McpSettings(_env_file=None)


if __name__ == "__main__":
    unittest.main()
