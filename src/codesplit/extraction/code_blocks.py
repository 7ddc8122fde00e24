"""
Code cleanup helpers: markdown fences and test-declaration counting.
"""

FENCE = "```"


def strip_markdown_fence(text: str) -> str:
    """
    Remove a surrounding markdown code fence.

    The text is trimmed first. When it starts with a fence and spans more
    than two lines, the opening line (```, ```go, ```json ...) is dropped,
    and the last line is dropped only if it is a bare closing fence. An
    unterminated fence therefore keeps its last line: it may be real code.
    Lines are re-joined without trimming again.

    Examples:
        >>> strip_markdown_fence("```go\\npackage main\\n```")
        'package main'
        >>> strip_markdown_fence("```go\\npackage main\\nfunc f() {}")
        'package main\\nfunc f() {}'
    """
    text = text.strip()
    if not text.startswith(FENCE):
        return text

    lines = text.split("\n")
    if len(lines) <= 2:
        return text

    if lines[-1].strip() == FENCE:
        lines = lines[1:-1]
    else:
        lines = lines[1:]
    return "\n".join(lines)


def clean_code(text: str) -> str:
    """Trim a code reply and strip its markdown fence, if any."""
    return strip_markdown_fence(text)


def count_tests_in_code(code: str, prefix: str = "func Test") -> int:
    """
    Count test declarations by line prefix.

    A line counts when, after stripping surrounding whitespace, it starts
    with ``prefix``. This is a heuristic, not a parse: declarations split
    across lines are missed and matching text inside raw strings is counted.
    """
    return sum(1 for line in code.split("\n") if line.strip().startswith(prefix))
