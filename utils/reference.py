# utils/reference.py
import re

from utils.errors import ParseError
from schemas.verse_schemas import ParsedReference

# Korean abbreviation -> full book name (개역개정 표기)
BOOK_NAMES = {
    # 구약
    '창': '창세기', '출': '출애굽기', '레': '레위기', '민': '민수기', '신': '신명기',
    '수': '여호수아', '삿': '사사기', '룻': '룻기', '삼상': '사무엘상', '삼하': '사무엘하',
    '왕상': '열왕기상', '왕하': '열왕기하', '대상': '역대상', '대하': '역대하',
    '스': '에스라', '느': '느헤미야', '에': '에스더', '욥': '욥기', '시': '시편',
    '잠': '잠언', '전': '전도서', '아': '아가', '사': '이사야', '렘': '예레미야',
    '애': '예레미야애가', '겔': '에스겔', '단': '다니엘', '호': '호세아', '욜': '요엘',
    '암': '아모스', '옵': '오바댜', '욘': '요나', '미': '미가', '나': '나훔',
    '합': '하박국', '습': '스바냐', '학': '학개', '슥': '스가랴', '말': '말라기',
    # 신약
    '마': '마태복음', '막': '마가복음', '눅': '누가복음', '요': '요한복음',
    '행': '사도행전', '롬': '로마서', '고전': '고린도전서', '고후': '고린도후서',
    '갈': '갈라디아서', '엡': '에베소서', '빌': '빌립보서', '골': '골로새서',
    '살전': '데살로니가전서', '살후': '데살로니가후서', '딤전': '디모데전서', '딤후': '디모데후서',
    '딛': '디도서', '몬': '빌레몬서', '히': '히브리서', '약': '야고보서',
    '벧전': '베드로전서', '벧후': '베드로후서', '요일': '요한일서', '요이': '요한이서',
    '요삼': '요한삼서', '유': '유다서', '계': '요한계시록'
}

OLD_TESTAMENT_BOOKS = frozenset([
    '창', '출', '레', '민', '신', '수', '삿', '룻', '삼상', '삼하',
    '왕상', '왕하', '대상', '대하', '스', '느', '에', '욥', '시',
    '잠', '전', '아', '사', '렘', '애', '겔', '단', '호', '욜',
    '암', '옵', '욘', '미', '나', '합', '습', '학', '슥', '말'
])

REFERENCE_PATTERN = re.compile(r'^([가-힣A-Za-z]+)([0-9]+):([0-9]+)$')


def get_testament(book_abbr):
    """'old' for the 39 Old Testament abbreviations, 'new' for anything else."""
    return 'old' if book_abbr in OLD_TESTAMENT_BOOKS else 'new'


def format_reference(book_abbr, chapter, verse):
    return f"{book_abbr}{chapter}:{verse}"


def parse_reference(reference):
    """Parse a compact reference like '창1:1'.

    The format is strict, the book lookup is not: an abbreviation missing from
    BOOK_NAMES is kept as the book name. Chapter and verse must be positive
    but are not checked against the real book layout.
    """
    if not isinstance(reference, str):
        raise ParseError(reference)

    match = REFERENCE_PATTERN.match(reference.strip())
    if not match:
        raise ParseError(reference)

    book_abbr, chapter, verse = match.groups()
    chapter, verse = int(chapter), int(verse)
    if chapter < 1 or verse < 1:
        raise ParseError(reference, 'non_positive_number')

    return ParsedReference(
        book_abbr=book_abbr,
        book=BOOK_NAMES.get(book_abbr, book_abbr),
        chapter=chapter,
        verse=verse,
        testament=get_testament(book_abbr)
    )
