# tests/test_reference.py
import pytest

from utils.errors import ParseError
from utils.reference import (
    BOOK_NAMES,
    OLD_TESTAMENT_BOOKS,
    format_reference,
    get_testament,
    parse_reference,
)


def test_book_table_covers_both_testaments():
    assert len(BOOK_NAMES) == 66
    assert len(OLD_TESTAMENT_BOOKS) == 39
    assert OLD_TESTAMENT_BOOKS <= set(BOOK_NAMES)


def test_parse_genesis():
    parsed = parse_reference('창1:1')
    assert parsed.book == '창세기'
    assert parsed.chapter == 1
    assert parsed.verse == 1
    assert parsed.testament.value == 'old'


def test_parse_multi_character_abbreviation():
    parsed = parse_reference('요일4:8')
    assert parsed.book == '요한일서'
    assert (parsed.chapter, parsed.verse) == (4, 8)
    assert parsed.testament.value == 'new'


@pytest.mark.parametrize('reference', ['invalidref', '창1', '창:1', '1:1', '창1:1:1', '창 1:1', '', '창0:1', '창1:0',
                                       '창１:１', '창١:٣'])
def test_malformed_references_are_rejected(reference):
    with pytest.raises(ParseError):
        parse_reference(reference)


def test_non_string_reference_is_rejected():
    with pytest.raises(ParseError):
        parse_reference(None)


def test_unknown_book_passes_through():
    parsed = parse_reference('토빗2:3')
    assert parsed.book == '토빗'
    assert parsed.testament.value == 'new'


def test_chapter_and_verse_are_not_bounded():
    parsed = parse_reference('창999:999')
    assert (parsed.chapter, parsed.verse) == (999, 999)


def test_round_trip_keeps_chapter_and_verse():
    for abbr in BOOK_NAMES:
        for chapter, verse in [(1, 1), (3, 16), (150, 6)]:
            reference = format_reference(abbr, chapter, verse)
            parsed = parse_reference(reference)
            assert format_reference(parsed.book_abbr, parsed.chapter, parsed.verse) == reference


def test_testament_lookup():
    assert get_testament('말') == 'old'
    assert get_testament('마') == 'new'
    assert get_testament('계') == 'new'
