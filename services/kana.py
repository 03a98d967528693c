"""
Kana chain matching for the Shiritori Bot.

A pronunciation is a comma-joined list of readings. Each reading is split
into kana units: one syllabary character optionally followed by a small
combining kana (きゃ, しゅ, ファ...). A word chains from the previous one
when the last unit of one of its readings is compatible with the first
unit of one of the new word's readings.
"""
import re
from typing import Iterable, List, NamedTuple, Optional

LONG_VOWEL_MARK = "ー"
FORBIDDEN_ENDINGS = ("ん", "ン")

# Katakana letters map onto hiragana by a fixed code point offset
_KATAKANA_FIRST = 0x30A1  # ァ
_KATAKANA_LAST = 0x30F6   # ヶ
_KATAKANA_OFFSET = 0x60

COMBINING_KANA = "ゃゅょぁぃぅぇぉゎ"

_VOWEL_ROWS = {
    "あ": "あかさたなはまやらわがざだばぱぁゃゎゕ",
    "い": "いきしちにひみりゐぎじぢびぴぃ",
    "う": "うくすつぬふむゆるぐずづぶぷぅゅゔ",
    "え": "えけせてねへめれゑげぜでべぺぇゖ",
    "お": "おこそとのほもよろをごぞどぼぽぉょ",
}
VOWEL_OF = {kana: vowel for vowel, row in _VOWEL_ROWS.items() for kana in row}

_BASE = "[ぁ-ゖー]"
_COMBINING = f"[{COMBINING_KANA}]"
_BEGIN_UNIT = re.compile(f"^({_BASE})({_COMBINING})?")
_END_UNIT = re.compile(f"({_BASE})({_COMBINING})?$")
_KANA_ONLY = re.compile("^[ぁ-ゖァ-ヺー]+$")


class KanaUnit(NamedTuple):
    """One syllable of a reading: base character plus optional combining kana."""
    base: str
    combining: str = ""

    def chains_to(self, start: "KanaUnit") -> bool:
        """
        True when a word ending in this unit may be followed by one
        starting with `start`.

        A bare ending (し) accepts し or しゃ; a combined ending (しゃ)
        only accepts the same combination.
        """
        if self.base != start.base:
            return False
        return not self.combining or self.combining == start.combining


def split_readings(pronunciations: str) -> List[str]:
    """Split a comma-joined pronunciation into its non-empty readings."""
    return [r.strip() for r in pronunciations.split(",") if r.strip()]


def to_hiragana(reading: str) -> str:
    """
    Normalise a reading to hiragana.

    Katakana shift to hiragana and every long-vowel mark is replaced by the
    plain vowel of the kana before it. Characters without a hiragana form,
    and marks whose vowel cannot be told, are kept as they are.
    """
    converted = []
    for ch in reading:
        code = ord(ch)
        if _KATAKANA_FIRST <= code <= _KATAKANA_LAST:
            ch = chr(code - _KATAKANA_OFFSET)
        elif ch == LONG_VOWEL_MARK and converted:
            ch = VOWEL_OF.get(converted[-1], ch)
        converted.append(ch)
    return "".join(converted)


def first_unit(reading: str) -> Optional[KanaUnit]:
    match = _BEGIN_UNIT.match(to_hiragana(reading))
    if not match:
        return None
    return KanaUnit(match.group(1), match.group(2) or "")


def last_unit(reading: str) -> Optional[KanaUnit]:
    match = _END_UNIT.search(to_hiragana(reading))
    if not match:
        return None
    return KanaUnit(match.group(1), match.group(2) or "")


def _units(readings: Iterable[str], extract) -> List[KanaUnit]:
    return [unit for unit in map(extract, readings) if unit is not None]


def matches(ending_pronunciations: str, starting_pronunciations: str) -> bool:
    """
    Check the chain rule between two comma-joined pronunciations.

    Returns True if any ending unit of the previous word chains to any
    starting unit of the next one.
    """
    endings = _units(split_readings(ending_pronunciations), last_unit)
    beginnings = _units(split_readings(starting_pronunciations), first_unit)
    return any(end.chains_to(begin) for end in endings for begin in beginnings)


def ends_in_forbidden_mora(pronunciations: str) -> bool:
    """True if any reading ends in ん, which would end the game."""
    return any(r.endswith(FORBIDDEN_ENDINGS) for r in split_readings(pronunciations))


def is_kana(text: str) -> bool:
    """True if `text` is made only of hiragana, katakana and long-vowel marks."""
    return bool(_KANA_ONLY.match(text))


def normalize_readings(readings: Iterable[str]) -> str:
    """Join readings into a comma-separated hiragana pronunciation, dropping repeats."""
    seen = []
    for reading in readings:
        for part in split_readings(reading):
            hiragana = to_hiragana(part)
            if hiragana not in seen:
                seen.append(hiragana)
    return ",".join(seen)
