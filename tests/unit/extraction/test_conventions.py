"""Unit tests for LanguageConventions."""

import pytest
from pydantic import ValidationError

from codesplit.extraction import LanguageConventions


class TestFromSettings:
    """Conventions taken from configuration."""

    def test_defaults_match_settings_defaults(self, test_settings):
        assert LanguageConventions.from_settings(test_settings) == LanguageConventions()

    def test_reads_language_settings(self, test_settings):
        settings = test_settings.model_copy(
            update={
                "SOURCE_SUFFIX": ".py",
                "TEST_FILE_MARKER": "_spec",
                "TEST_DECL_PREFIX": "def test_",
            }
        )
        conventions = LanguageConventions.from_settings(settings)

        assert conventions.source_suffix == ".py"
        assert conventions.test_marker == "_spec"
        assert conventions.test_decl_prefix == "def test_"

    def test_empty_values_rejected(self):
        with pytest.raises(ValidationError):
            LanguageConventions(source_suffix="")

    def test_frozen(self):
        with pytest.raises(ValidationError):
            LanguageConventions().source_suffix = ".rs"


class TestBoundHelpers:
    """Extraction helpers using the bound conventions."""

    @pytest.fixture
    def python(self):
        return LanguageConventions(
            source_suffix=".py", test_marker="_spec", test_decl_prefix="def test_"
        )

    def test_parse_filenames(self, python):
        assert python.parse_filenames('["models.py", "views.go", "urls.py"]') == [
            "models.py",
            "urls.py",
        ]

    def test_companion_test_name(self, python):
        assert python.companion_test_name("models.py") == "models_spec.py"

    def test_count_tests(self, python):
        code = "def test_one():\n    pass\n\n    def test_two():\n        pass\nfunc TestGo(t) {}\n"
        assert python.count_tests(code) == 2

    def test_go_defaults(self):
        go = LanguageConventions()
        assert go.companion_test_name("types.go") == "types_test.go"
        assert go.count_tests("func TestA(t *testing.T) {}\nfunc helper() {}") == 1

    @pytest.mark.parametrize(
        "name,expected",
        [("types_test.go", True), ("types.go", False), ("types_test.py", False)],
    )
    def test_is_test_file(self, name, expected):
        assert LanguageConventions().is_test_file(name) is expected
