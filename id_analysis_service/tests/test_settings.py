import os
import unittest
from unittest.mock import patch

from pydantic import ValidationError

from id_analysis_service.app import create_app
from id_analysis_service.processor.analyzer import DocumentAnalyzer
from id_analysis_service.settings import PLACEHOLDER_ENDPOINT, PLACEHOLDER_KEY, Settings
from id_analysis_service.tests.utils_helpers import make_settings

CLEAN_ENV = {k: v for k, v in os.environ.items()
             if not k.startswith(("FORM_RECOGNIZER_", "ID_ANALYSIS_")) and k != "PORT"}


class TestSettings(unittest.TestCase):

    @patch.dict(os.environ, CLEAN_ENV, clear=True)
    def test_defaults(self):
        app_settings = Settings(_env_file=None)  # type: ignore[call-arg]
        self.assertEqual(app_settings.PORT, 3000)
        self.assertEqual(app_settings.FORM_RECOGNIZER_KEY, PLACEHOLDER_KEY)
        self.assertEqual(app_settings.FORM_RECOGNIZER_ENDPOINT, PLACEHOLDER_ENDPOINT)
        self.assertFalse(app_settings.CREDENTIALS_CONFIGURED)
        self.assertIsNone(app_settings.POLL_TIMEOUT)
        self.assertFalse(app_settings.CLEANUP_ON_ERROR)
        self.assertTrue(app_settings.UPLOAD_DIR.endswith("uploads"))

    @patch.dict(os.environ, {**CLEAN_ENV,
                             "FORM_RECOGNIZER_KEY": "abc",
                             "FORM_RECOGNIZER_ENDPOINT": "https://west.api.cognitive.microsoft.com/ ",
                             "PORT": "8080",
                             "ID_ANALYSIS_POLL_TIMEOUT": "90"}, clear=True)
    def test_environment(self):
        app_settings = Settings(_env_file=None)  # type: ignore[call-arg]
        self.assertEqual(app_settings.PORT, 8080)
        self.assertEqual(app_settings.FORM_RECOGNIZER_ENDPOINT, "https://west.api.cognitive.microsoft.com")
        self.assertEqual(app_settings.POLL_TIMEOUT, 90.0)
        self.assertTrue(app_settings.CREDENTIALS_CONFIGURED)

    @patch.dict(os.environ, {**CLEAN_ENV, "ID_ANALYSIS_POLL_TIMEOUT": ""}, clear=True)
    def test_empty_timeout_means_none(self):
        self.assertIsNone(Settings(_env_file=None).POLL_TIMEOUT)  # type: ignore[call-arg]

    def test_invalid_values(self):
        with self.assertRaises(ValidationError):
            make_settings(PORT=70000)
        with self.assertRaises(ValidationError):
            make_settings(ID_ANALYSIS_POLL_TIMEOUT=0)


class TestCreateApp(unittest.TestCase):

    def test_analyzer_built_from_settings(self):
        app_settings = make_settings(ID_ANALYSIS_POLL_TIMEOUT=30)
        app = create_app(app_settings)
        analyzer = app.state.analyzer
        self.assertIsInstance(analyzer, DocumentAnalyzer)
        self.assertEqual(analyzer.endpoint, "https://test.cognitiveservices.azure.com")
        self.assertEqual(analyzer.model_id, "prebuilt-idDocument")
        self.assertEqual(analyzer.poll_timeout, 30)
        self.assertTrue(os.path.isdir(app_settings.UPLOAD_DIR))

    def test_placeholder_credentials_only_warn(self):
        app_settings = make_settings(FORM_RECOGNIZER_KEY=PLACEHOLDER_KEY,
                                     FORM_RECOGNIZER_ENDPOINT=PLACEHOLDER_ENDPOINT)
        with self.assertLogs(level="WARNING"):
            create_app(app_settings)

    def test_placeholder_credentials_refused_when_required(self):
        app_settings = make_settings(FORM_RECOGNIZER_KEY=PLACEHOLDER_KEY,
                                     ID_ANALYSIS_REQUIRE_CREDENTIALS=True)
        with self.assertRaises(RuntimeError):
            create_app(app_settings)
