"""
Per-language file naming and test declaration conventions.

Binds the suffix, test-file marker and test declaration prefix from settings
so callers do not thread them through every extraction call.
"""

from pydantic import BaseModel, ConfigDict, Field

from codesplit.extraction.code_blocks import count_tests_in_code
from codesplit.extraction.filenames import companion_test_name, parse_filenames
from codesplit.models.split_models import FilenamePlan


class LanguageConventions(BaseModel):
    """Naming conventions of the target language (Go by default)."""
    model_config = ConfigDict(frozen=True)

    source_suffix: str = Field(default=".go", min_length=1)
    test_marker: str = Field(default="_test", min_length=1)
    test_decl_prefix: str = Field(default="func Test", min_length=1)

    @classmethod
    def from_settings(cls, settings) -> "LanguageConventions":
        """Build conventions from SOURCE_SUFFIX, TEST_FILE_MARKER and TEST_DECL_PREFIX."""
        return cls(
            source_suffix=settings.SOURCE_SUFFIX,
            test_marker=settings.TEST_FILE_MARKER,
            test_decl_prefix=settings.TEST_DECL_PREFIX,
        )

    def parse_filenames(self, text: str) -> FilenamePlan:
        return parse_filenames(text, suffix=self.source_suffix)

    def companion_test_name(self, name: str) -> str:
        return companion_test_name(name, suffix=self.source_suffix, marker=self.test_marker)

    def count_tests(self, code: str) -> int:
        return count_tests_in_code(code, prefix=self.test_decl_prefix)

    def is_test_file(self, name: str) -> bool:
        """True when name ends with the test marker followed by the source suffix."""
        return name.endswith(f"{self.test_marker}{self.source_suffix}")
