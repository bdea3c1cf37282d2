"""Control markers that pick Code128 code sets inside a payload."""

# Code set A for the text that follows
CODE_A_MARKER = "À"
# Code set C for the digit runs that follow
CODE_C_MARKER = "Ć"

MARKERS = frozenset((CODE_A_MARKER, CODE_C_MARKER))

_BEFORE, _IN_RUN, _AFTER = range(3)


def _ascii_upper(text: str) -> str:
    return "".join(chr(ord(c) - 32) if "a" <= c <= "z" else c for c in text)


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def basic_marker(text: str) -> str:
    """Uppercase text and mark it for code set A."""
    return CODE_A_MARKER + _ascii_upper(text)


def _first_digit_run(text: str):
    """Return (start, end) of the first maximal digit run, or None."""
    state = _BEFORE
    start = end = len(text)
    for pos, char in enumerate(text):
        if state == _BEFORE and _is_digit(char):
            state, start = _IN_RUN, pos
        elif state == _IN_RUN and not _is_digit(char):
            state, end = _AFTER, pos
            break

    if state == _BEFORE:
        return None
    return start, end


def numeric_aware_marker(text: str) -> str:
    """Uppercase text and wrap its first digit run in code set C markers.

    Only the first digit run is marked. A run reaching the end of the text
    marks the whole text for code set C instead.
    """
    run = _first_digit_run(text)
    if run is None:
        return basic_marker(text)

    upper = _ascii_upper(text)
    start, end = run
    if end == len(text):
        return CODE_C_MARKER + upper

    return (
        CODE_A_MARKER + upper[:start]
        + CODE_C_MARKER + upper[start:end]
        + CODE_A_MARKER + upper[end:]
    )
