"""
Tolerant extraction of structured data from model replies.

All functions are pure and total: any input string yields a result, in the
worst case the weakest fallback.

- parse_filenames: filename plan from a planning reply
- parse_source_and_test: {source, test} pair from a generation reply
- clean_code / strip_markdown_fence: code without its markdown fence
- count_tests_in_code: number of test declarations in a code blob
- companion_test_name: companion test filename of a source file
- LanguageConventions: the three helpers above bound to one language's naming
"""

from codesplit.extraction.code_blocks import clean_code, count_tests_in_code, strip_markdown_fence
from codesplit.extraction.conventions import LanguageConventions
from codesplit.extraction.filenames import companion_test_name, parse_filenames
from codesplit.extraction.source_test import parse_source_and_test

__all__ = [
    "parse_filenames",
    "parse_source_and_test",
    "clean_code",
    "strip_markdown_fence",
    "count_tests_in_code",
    "companion_test_name",
    "LanguageConventions",
]
