from __future__ import annotations

from passport_ocr.config import MRZConfig
from passport_ocr.pipeline.mrz_correct import (
    DIGIT,
    LETTER,
    correct_char,
    correct_line2,
    correct_name_region,
    correct_nationality,
    correct_sex,
    split_name_region,
)

LINE2 = "U123456785TUR9001015M2501017<<<<<<<<<<<<<<06"


def test_digit_class_remaps_confusable_letters() -> None:
    pairs = {
        "O": "0", "Q": "0", "D": "0", "I": "1", "L": "1", "l": "1", "Z": "2", "z": "2",
        "E": "3", "A": "4", "H": "4", "S": "5", "G": "6", "b": "6", "T": "7", "B": "8",
        "g": "9", "q": "9",
    }
    for observed, expected in pairs.items():
        assert correct_char(DIGIT, observed) == expected


def test_digit_class_leaves_digits_and_unknowns() -> None:
    assert correct_char(DIGIT, "7") == "7"
    assert correct_char(DIGIT, "<") == "<"
    assert correct_char(DIGIT, "X") == "X"


def test_letter_class_remaps_digits() -> None:
    assert correct_char(LETTER, "7") == "T"
    assert correct_char(LETTER, "0") == "O"
    assert correct_char(LETTER, "R") == "R"
    assert correct_char(LETTER, "<") == "<"


def test_birth_year_letter_o_becomes_zero() -> None:
    noisy = LINE2[:13] + "O50101" + LINE2[19:]
    corrected = correct_line2(noisy, MRZConfig())
    assert corrected[13:19] == "050101"


def test_digit_slots_only() -> None:
    # Passport and national id numbers are alphanumeric and stay as read.
    line = "UO2345678" + "S" + "TUR" + "9001015" + "M" + "2501017" + "ABCDE".ljust(14, "<") + "OS"
    corrected = correct_line2(line, MRZConfig())
    assert corrected[0:9] == "UO2345678"
    assert corrected[9] == "5"
    assert corrected[28:33] == "ABCDE"
    assert corrected[42:44] == "05"


def test_nationality_lookalikes_rewritten_to_expected() -> None:
    assert correct_nationality("7UR", "TUR") == "TUR"
    assert correct_nationality("TU8", "TUR") == "TUR"
    assert correct_nationality("7U8", "TUR") == "TUR"
    assert correct_nationality("TUR", "TUR") == "TUR"


def test_nationality_unrelated_code_kept() -> None:
    assert correct_nationality("DEU", "TUR") == "DEU"
    assert correct_nationality("D<<", "TUR") == "D<<"


def test_nationality_without_expected_code() -> None:
    assert correct_nationality("7U8", None) == "TUB"
    line = LINE2[:10] + "7U8" + LINE2[13:]
    assert correct_line2(line, MRZConfig(expected_nationality=""))[10:13] == "TUB"
    assert correct_line2(line, MRZConfig(expected_nationality="TUR"))[10:13] == "TUR"


def test_sex_field() -> None:
    for code in ("M", "F", "<"):
        assert correct_sex(code) == code
    for code in ("W", "N", "H"):
        assert correct_sex(code) == "M"
    assert correct_sex("X") == "X"


def test_name_region_noise_runs_become_filler() -> None:
    line1 = "P<TURYILMAZ1<AHMET".ljust(44, "<")
    corrected = correct_name_region(line1)
    assert corrected.startswith("P<TURYILMAZ<<AHMET")
    assert split_name_region(corrected) == ("YILMAZ", "AHMET")


def test_single_noise_glyph_between_letters() -> None:
    line1 = "P<TURYILMAZKAHMET".ljust(44, "<")
    assert correct_name_region(line1) == line1
    line1 = "P<TURDEMIR<<AYSE7NUR".ljust(44, "<")
    assert correct_name_region(line1).startswith("P<TURDEMIR<<AYSE<NUR<")


def test_country_code_untouched() -> None:
    line1 = "P<T7RYILMAZ<<AHMET".ljust(44, "<")
    assert correct_name_region(line1)[:5] == "P<T7R"


def test_split_name_region() -> None:
    assert split_name_region("P<UTOERIKSSON<<ANNA<MARIA<<<<<<<") == ("ERIKSSON", "ANNA<MARIA")
    assert split_name_region("P<TURYILMAZ<<<<<<<<") == ("YILMAZ", "")
    assert split_name_region("P<TUR<<AHMET<<<<") == ("", "AHMET")
