"""
Filename plan extraction.

The planning prompt asks for a JSON array such as ["types.go", "helpers.go"],
but replies often wrap it in prose or drop the brackets entirely. Two
strategies are tried in order:

1. bracket list: the text between the first "[" and the last "]", split on
   commas, each piece stripped of quotes and whitespace
2. word scan: every whitespace-separated token, stripped of quotes,
   commas and brackets

Only names ending in the source suffix are kept, in first-seen order.
Repeated names are kept as well.
"""

from typing import Optional

from codesplit.extraction.chain import first_match
from codesplit.models.split_models import FilenamePlan

_PIECE_STRIP = " \"'\t\n"
_WORD_STRIP = "\"',[]"


def _from_bracket_list(text: str, suffix: str) -> Optional[FilenamePlan]:
    start = text.find("[")
    end = text.rfind("]")
    if start < 0 or end <= start:
        return None

    names = [
        piece.strip(_PIECE_STRIP)
        for piece in text[start + 1:end].split(",")
    ]
    names = [name for name in names if name.endswith(suffix)]
    return names or None


def _from_words(text: str, suffix: str) -> FilenamePlan:
    words = (word.strip(_WORD_STRIP) for word in text.split())
    return [word for word in words if word.endswith(suffix)]


def parse_filenames(text: str, suffix: str = ".go") -> FilenamePlan:
    """
    Extract proposed source filenames from a planning reply.

    Args:
        text: Raw model reply
        suffix: Source file suffix of the target language

    Returns:
        Filenames in first-seen order; empty when nothing matched

    Examples:
        >>> parse_filenames('["a.go", "b.go"]')
        ['a.go', 'b.go']
        >>> parse_filenames("Create types.go and helpers.go")
        ['types.go', 'helpers.go']
    """
    return first_match(
        [lambda t: _from_bracket_list(t, suffix)],
        lambda t: _from_words(t, suffix),
        text,
    )


def companion_test_name(name: str, suffix: str = ".go", marker: str = "_test") -> str:
    """
    Name of the test file accompanying a source file.

        >>> companion_test_name("types.go")
        'types_test.go'
    """
    stem = name[: -len(suffix)] if suffix and name.endswith(suffix) else name
    return f"{stem}{marker}{suffix}"
