# utils/classifier.py
import re

from schemas.verse_schemas import VerseClassification

# Declaration order matters: it decides both theme order and category priority
THEME_KEYWORDS = {
    '사랑': ['사랑', '애정', '자비', '긍휼', '은혜'],
    '믿음': ['믿음', '신뢰', '확신', '신앙'],
    '소망': ['소망', '희망', '기대', '약속'],
    '용서': ['용서', '사함', '화해', '회개'],
    '지혜': ['지혜', '명철', '분별', '깨달음'],
    '위로': ['위로', '안위', '평안', '쉼'],
    '인도': ['인도', '길', '방향', '인도하심'],
    '힘': ['힘', '능력', '강함', '권세'],
    '평화': ['평화', '평안', '화평', '안식'],
    '기쁨': ['기쁨', '즐거움', '감사', '찬양'],
    '기도': ['기도', '간구', '부르짖음', '간청'],
    '구원': ['구원', '구속', '해방', '건짐'],
    '가족': ['가족', '부모', '자녀', '형제'],
    '관계': ['관계', '친구', '이웃', '동료'],
    '일': ['일', '직업', '사명', '부르심'],
    '고난': ['고난', '시험', '환난', '어려움'],
    '치유': ['치유', '고침', '건강', '회복'],
    '감사': ['감사', '찬송', '영광', '찬양'],
    '겸손': ['겸손', '낮춤', '온유', '겸허'],
    '순종': ['순종', '복종', '따름', '청종'],
}

THEME_CATEGORIES = {
    '사랑': 'love',
    '믿음': 'faith',
    '소망': 'hope',
    '용서': 'forgiveness',
    '지혜': 'wisdom',
    '위로': 'comfort',
    '인도': 'guidance',
    '힘': 'strength',
    '평화': 'peace',
    '기쁨': 'joy',
    '기도': 'prayer',
    '구원': 'salvation',
    '가족': 'family',
    '관계': 'relationship',
    '일': 'work',
    '고난': 'suffering',
    '치유': 'healing',
    '감사': 'gratitude',
    '겸손': 'humility',
    '순종': 'obedience',
}

DEFAULT_CATEGORY = 'other'

CATEGORIES = (
    'faith', 'love', 'hope', 'forgiveness', 'wisdom', 'comfort',
    'guidance', 'strength', 'peace', 'joy', 'prayer', 'salvation',
    'family', 'relationship', 'work', 'suffering', 'healing',
    'gratitude', 'humility', 'obedience', DEFAULT_CATEGORY
)

THEMES = tuple(THEME_KEYWORDS)

MIN_KEYWORD_LENGTH = 2

# Keep ASCII word characters and Hangul syllables only
_NON_KEYWORD_CHARS = re.compile(r'[^A-Za-z0-9_가-힣]')


def extract_keywords(text):
    """Whitespace tokens stripped of punctuation, length >= 2, first-seen order."""
    keywords = []
    seen = set()
    for word in (text or '').split():
        clean_word = _NON_KEYWORD_CHARS.sub('', word)
        if len(clean_word) >= MIN_KEYWORD_LENGTH and clean_word not in seen:
            seen.add(clean_word)
            keywords.append(clean_word)
    return keywords


def analyze_themes(text):
    # Plain substring test, so '일' also fires inside longer words
    text = text or ''
    return [
        theme for theme, synonyms in THEME_KEYWORDS.items()
        if any(synonym in text for synonym in synonyms)
    ]


def categorize_verse(themes):
    detected = set(themes)
    for theme in THEMES:
        if theme in detected and theme in THEME_CATEGORIES:
            return THEME_CATEGORIES[theme]
    return DEFAULT_CATEGORY


def build_search_text(text, themes, keywords):
    """Text fed to the MongoDB full-text index."""
    return f"{text} {' '.join(themes)} {' '.join(keywords)}"


def classify(text):
    keywords = extract_keywords(text)
    themes = analyze_themes(text)
    return VerseClassification(
        keywords=keywords,
        themes=themes,
        category=categorize_verse(themes),
        search_text=build_search_text(text or '', themes, keywords)
    )
