"""
Unit tests for services/kana.py: kana units and the chain rule.

Pure Python, no database.
"""
import pytest

from services.kana import (
    KanaUnit,
    ends_in_forbidden_mora,
    first_unit,
    is_kana,
    last_unit,
    matches,
    normalize_readings,
    to_hiragana,
)


class TestToHiragana:

    def test_katakana_becomes_hiragana(self):
        assert to_hiragana("ラジオ") == "らじお"

    def test_hiragana_unchanged(self):
        assert to_hiragana("さくら") == "さくら"

    def test_long_vowel_mark_takes_previous_vowel(self):
        assert to_hiragana("コーヒー") == "こおひい"
        assert to_hiragana("カー") == "かあ"

    def test_long_vowel_after_combined_kana(self):
        assert to_hiragana("シャー") == "しゃあ"

    def test_unresolvable_mark_kept(self):
        assert to_hiragana("ンー") == "んー"
        assert to_hiragana("ー") == "ー"


class TestUnits:

    def test_first_unit_plain(self):
        assert first_unit("さくら") == KanaUnit("さ")

    def test_first_unit_combined(self):
        assert first_unit("しゃかい") == KanaUnit("し", "ゃ")

    def test_last_unit_plain(self):
        assert last_unit("さくら") == KanaUnit("ら")

    def test_last_unit_combined(self):
        assert last_unit("きしゃ") == KanaUnit("し", "ゃ")

    def test_last_unit_of_katakana(self):
        assert last_unit("ティーシャツ") == KanaUnit("つ")

    def test_no_kana(self):
        assert first_unit("abc") is None
        assert last_unit("") is None


class TestMatches:

    def test_same_kana(self):
        assert matches("さくら", "らじお")

    def test_katakana_and_hiragana_match(self):
        assert matches("さくら", "ラジオ")

    def test_different_kana(self):
        assert not matches("さくら", "すいか")

    def test_bare_ending_accepts_combined_start(self):
        assert matches("いし", "しゃかい")

    def test_bare_ending_accepts_bare_start(self):
        assert matches("いし", "しか")

    def test_combined_ending_needs_same_combination(self):
        assert matches("きしゃ", "しゃかい")
        assert not matches("きしゃ", "しか")
        assert not matches("きしゃ", "しょうゆ")

    def test_any_reading_pair_can_match(self):
        assert matches("にっぽん,にほん,やまと", "とけい")
        assert matches("さくら", "いぬ,らっぱ")

    def test_no_readings(self):
        assert not matches("", "らじお")
        assert not matches("さくら", "")

    @pytest.mark.parametrize("start", ["あめ", "あさ", "かめ", "いぬ", "ぁ"])
    def test_elongation_same_as_plain_vowel(self, start):
        assert matches("かー", start) == matches("かあ", start)

    def test_elongation_chains_to_vowel(self):
        assert matches("コーヒー", "いぬ")
        assert not matches("コーヒー", "ひまわり")


class TestHelpers:

    def test_ends_in_forbidden_mora(self):
        assert ends_in_forbidden_mora("ごはん")
        assert ends_in_forbidden_mora("らいおん,ライオン")
        assert ends_in_forbidden_mora("パン")
        assert not ends_in_forbidden_mora("さくら")
        assert not ends_in_forbidden_mora("")

    def test_is_kana(self):
        assert is_kana("ねこじた")
        assert is_kana("コーヒー")
        assert not is_kana("猫舌")
        assert not is_kana("neko")
        assert not is_kana("")

    def test_normalize_readings(self):
        assert normalize_readings(["ネコ", " ねこ ", "にゃんこ"]) == "ねこ,にゃんこ"
        assert normalize_readings(["かー,カー"]) == "かあ"
        assert normalize_readings([]) == ""
