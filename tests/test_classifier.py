# tests/test_classifier.py
from utils.classifier import (
    CATEGORIES,
    THEMES,
    analyze_themes,
    build_search_text,
    categorize_verse,
    classify,
    extract_keywords,
)


def test_keywords_strip_punctuation_and_short_tokens():
    keywords = extract_keywords('서로 사랑하라, 내가 너희를 사랑한 것 같이!')
    assert keywords == ['서로', '사랑하라', '내가', '너희를', '사랑한', '같이']


def test_keywords_are_deduplicated_in_order():
    assert extract_keywords('거룩 거룩 거룩하다 거룩') == ['거룩', '거룩하다']


def test_keywords_of_empty_text():
    assert extract_keywords('') == []
    assert extract_keywords('   ') == []


def test_themes_follow_declaration_order():
    text = '소망의 하나님이 모든 기쁨과 평강을 믿음 안에서 너희에게 충만하게 하사 성령의 능력으로'
    assert analyze_themes(text) == ['믿음', '소망', '힘', '기쁨']


def test_theme_matching_is_substring_based():
    # '일' inside '일어나' still counts
    assert '일' in analyze_themes('일어나 빛을 발하라')


def test_category_uses_first_declared_theme():
    assert categorize_verse(['감사', '사랑']) == 'love'
    assert categorize_verse(['고난', '위로']) == 'comfort'


def test_category_defaults_to_other():
    assert categorize_verse([]) == 'other'
    assert categorize_verse(['동행']) == 'other'


def test_category_is_always_known():
    samples = ['', ' ', 'abc', '여호와는 나의 목자시니', '사랑', '일', '!!!', '감사 찬송 영광']
    for text in samples:
        assert classify(text).category in CATEGORIES


def test_every_theme_maps_to_a_category():
    assert len(CATEGORIES) == 21
    for theme in THEMES:
        assert categorize_verse([theme]) in CATEGORIES
        assert categorize_verse([theme]) != 'other'


def test_themes_grow_with_longer_text():
    short = '우리를 위로하사'
    longer = '우리의 모든 환난 중에서 우리를 위로하사 능히 위로할 수 있게'
    assert set(analyze_themes(short)) <= set(analyze_themes(longer))


def test_search_text_concatenation():
    assert build_search_text('본문', ['사랑', '믿음'], ['본문']) == '본문 사랑 믿음 본문'
    assert build_search_text('본문', [], []) == '본문  '


def test_classify_full_verse():
    result = classify('네 손이 일을 얻는 대로 힘을 다하여 할지어다')
    assert result.themes == ['힘', '일']
    assert result.category == 'strength'
    assert '일을' in result.keywords
    assert result.search_text.startswith('네 손이 일을 얻는 대로 힘을 다하여 할지어다 힘 일 ')
