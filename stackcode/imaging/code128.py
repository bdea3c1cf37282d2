"""Code128 symbol encoding and rasterization."""

import logging
from itertools import groupby
from typing import Iterator, List, Tuple

from PIL import Image, ImageDraw

from .errors import EncodingError
from .markers import CODE_A_MARKER, CODE_C_MARKER, MARKERS

BARCODE_HEIGHT = 30

BAR_COLOR = (0, 0, 0, 255)
SPACE_COLOR = (255, 255, 255, 255)

# Bar/space widths indexed by codeword value, 0-106
PATTERNS = (
    "212222", "222122", "222221", "121223", "121322", "131222", "122213",
    "122312", "132212", "221213", "221312", "231212", "112232", "122132",
    "122231", "113222", "123122", "123221", "223211", "221132", "221231",
    "213212", "223112", "312131", "311222", "321122", "321221", "312212",
    "322112", "322211", "212123", "212321", "232121", "111323", "131123",
    "131321", "112313", "132113", "132311", "211313", "231113", "231311",
    "112133", "112331", "132131", "113123", "113321", "133121", "313121",
    "211331", "231131", "213113", "213311", "213131", "311123", "311321",
    "331121", "312113", "312311", "332111", "314111", "221411", "431111",
    "111224", "111422", "121124", "121421", "141122", "141221", "112214",
    "112412", "122114", "122411", "142112", "142211", "241211", "221114",
    "413111", "241112", "134111", "111242", "121142", "121241", "114212",
    "124112", "124211", "411212", "421112", "421211", "212141", "214121",
    "412121", "111143", "111341", "131141", "114113", "114311", "411113",
    "411311", "113141", "114131", "311141", "411131", "211412", "211214",
    "211232", "2331112",
)

CODE_A, CODE_B, CODE_C = "A", "B", "C"

START = {CODE_A: 103, CODE_B: 104, CODE_C: 105}
SWITCH = {CODE_A: 101, CODE_B: 100, CODE_C: 99}
SHIFT = 98
STOP = 106

_MODES = {CODE_A_MARKER: CODE_A, CODE_C_MARKER: CODE_C}

Run = Tuple[str, str]


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def _in_code_a(char: str) -> bool:
    return " " <= char <= "_"


def _validate(text: str) -> None:
    """Reject characters outside printable ASCII and the marker set."""
    for pos, char in enumerate(text):
        if char in MARKERS:
            continue
        if not " " <= char <= "~":
            raise EncodingError(f"character {char!r} at position {pos} is not encodable in Code128")


def _segments(text: str) -> Iterator[Tuple[str, str]]:
    """Split text at markers into (mode, chunk) pairs; leading text is automatic."""
    mode, chunk = None, []
    for char in text:
        if char in MARKERS:
            if chunk:
                yield mode, "".join(chunk)
            mode, chunk = _MODES[char], []
        else:
            chunk.append(char)
    if chunk:
        yield mode, "".join(chunk)


def _alphanumeric_runs(chunk: str, charset: str) -> Iterator[Run]:
    """Split chunk by the set each character needs, preferring charset."""
    if charset == CODE_B:
        yield CODE_B, chunk
        return
    for in_a, chars in groupby(chunk, key=_in_code_a):
        yield (CODE_A if in_a else CODE_B), "".join(chars)


def _plan(mode: str, chunk: str) -> Iterator[Run]:
    fallback = CODE_B if mode is None else CODE_A
    for is_digit, chars in groupby(chunk, key=_is_digit):
        run = "".join(chars)
        if is_digit and mode == CODE_C:
            numeric = True
        elif is_digit and mode is None:
            numeric = len(run) >= 4 or (run == chunk and len(run) % 2 == 0)
        else:
            numeric = False

        if not numeric:
            yield from _alphanumeric_runs(run, fallback)
            continue
        if len(run) % 2:
            yield fallback, run[0]
            run = run[1:]
        if run:
            yield CODE_C, run


def _values(run: str, charset: str) -> List[int]:
    if charset == CODE_C:
        return [int(run[i:i + 2]) for i in range(0, len(run), 2)]
    return [ord(char) - 32 for char in run]


def checksum(codewords: List[int]) -> int:
    """Weighted mod 103 sum of a start code followed by data codewords."""
    total = codewords[0]
    for weight, value in enumerate(codewords[1:], start=1):
        total += weight * value
    return total % 103


def code128_codewords(text: str) -> List[int]:
    """Encode marked text as Code128 codewords, start and stop included."""
    _validate(text)

    runs = [run for mode, chunk in _segments(text) for run in _plan(mode, chunk)]
    if not runs:
        raise EncodingError("nothing to encode")

    codes = []
    current = None
    for charset, run in runs:
        if current is None:
            codes.append(START[charset])
            current = charset
        elif charset != current:
            if len(run) == 1 and CODE_C not in (charset, current):
                codes.append(SHIFT)
                codes.extend(_values(run, charset))
                continue
            codes.append(SWITCH[charset])
            current = charset
        codes.extend(_values(run, charset))

    codes.append(checksum(codes))
    codes.append(STOP)
    return codes


def code128_modules(codewords: List[int]) -> str:
    """Concatenate the bar/space width patterns of codewords."""
    return "".join(PATTERNS[code] for code in codewords)


def encode(text: str, height: int = BARCODE_HEIGHT) -> Image.Image:
    """Render marked text as a Code128 bitmap one pixel per module wide."""
    codewords = code128_codewords(text)
    widths = [int(w) for w in code128_modules(codewords)]
    width = sum(widths)
    logging.debug(f"Encoded {text!r} as {len(codewords)} codewords, {width}x{height}px")

    barcode = Image.new("RGBA", (width, height), SPACE_COLOR)
    draw = ImageDraw.Draw(barcode)
    x = 0
    for index, module_width in enumerate(widths):
        if index % 2 == 0:
            draw.rectangle(((x, 0), (x + module_width - 1, height - 1)), fill=BAR_COLOR)
        x += module_width
    return barcode
