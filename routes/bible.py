# routes/bible.py
from flask import Blueprint, current_app, jsonify, request
import logging

from schemas.verse_schemas import CounselingTopic, Emotion
from utils.errors import ValidationError

bible_bp = Blueprint('bible', __name__)
logger = logging.getLogger(__name__)

SEARCH_MAX_LIMIT = 50
RECOMMEND_MAX_LIMIT = 20

SUPPORTED_EMOTIONS = [emotion.value for emotion in Emotion]
SUPPORTED_TOPICS = [topic.value for topic in CounselingTopic]

VERSE_FIELDS = {'reference', 'text', 'book', 'chapter', 'verse', 'themes', 'category'}
SUMMARY_FIELDS = {'reference', 'text', 'book', 'themes', 'category'}


def get_service():
    return current_app.extensions['bible_service']


def error_response(code, status=400, detail=None, **extra):
    payload = {"error": code}
    if detail:
        payload["detail"] = detail
    payload.update(extra)
    return jsonify(payload), status


def limit_arg(default, maximum):
    raw = request.args.get('limit', default)
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        raise ValidationError('limit', f"limit must be an integer, got {raw!r}")
    return min(limit, maximum)


def serialize(verses, fields):
    return [verse.model_dump(mode='json', include=fields) for verse in verses]


def store_unavailable():
    return error_response('store_unavailable', 503, '성경 데이터베이스에 연결할 수 없습니다.')


@bible_bp.errorhandler(ValidationError)
def handle_validation_error(e):
    return error_response('validation_error', 400, e.detail, field=e.field)


@bible_bp.route('/search', methods=['GET'])
def search():
    """GET /api/bible/search?q=키워드&category=love&testament=new&limit=10"""
    query = request.args.get('q', '')
    category = request.args.get('category') or None
    testament = request.args.get('testament') or None
    limit = limit_arg(10, SEARCH_MAX_LIMIT)

    result = get_service().search_by_keywords(query, category=category, testament=testament, limit=limit)
    if not result.ok:
        return store_unavailable()

    return jsonify({
        'success': True,
        'query': query,
        'options': {'category': category, 'testament': testament, 'limit': limit},
        'results': serialize(result, VERSE_FIELDS | {'usage_count'}),
        'count': len(result)
    })


@bible_bp.route('/themes', methods=['GET'])
def themes():
    """GET /api/bible/themes?themes=사랑,믿음&limit=10"""
    theme_list = [theme.strip() for theme in request.args.get('themes', '').split(',') if theme.strip()]
    limit = limit_arg(10, SEARCH_MAX_LIMIT)

    result = get_service().search_by_themes(theme_list, limit)
    if not result.ok:
        return store_unavailable()

    return jsonify({
        'success': True,
        'themes': theme_list,
        'results': serialize(result, VERSE_FIELDS),
        'count': len(result)
    })


@bible_bp.route('/emotion/<emotion>', methods=['GET'])
def emotion_verses(emotion):
    if emotion not in SUPPORTED_EMOTIONS:
        return error_response('unsupported_emotion', 400, '지원하지 않는 감정입니다.',
                              supported_emotions=SUPPORTED_EMOTIONS)

    limit = limit_arg(5, RECOMMEND_MAX_LIMIT)
    result = get_service().get_verses_for_emotion(emotion, limit)
    if not result.ok:
        return store_unavailable()

    return jsonify({
        'success': True,
        'emotion': emotion,
        'message': f"{emotion} 감정에 도움이 되는 성경 구절들입니다.",
        'results': serialize(result, SUMMARY_FIELDS),
        'count': len(result)
    })


@bible_bp.route('/counseling/<topic>', methods=['GET'])
def counseling_verses(topic):
    if topic not in SUPPORTED_TOPICS:
        return error_response('unsupported_topic', 400, '지원하지 않는 상담 주제입니다.',
                              supported_topics=SUPPORTED_TOPICS)

    urgency = request.args.get('urgency', 'medium')
    limit = limit_arg(8, RECOMMEND_MAX_LIMIT)
    result = get_service().get_verses_for_counseling(topic, urgency=urgency, limit=limit)
    if not result.ok:
        return store_unavailable()

    return jsonify({
        'success': True,
        'topic': topic,
        'urgency': urgency,
        'message': f"{topic} 관련 상담에 도움이 되는 성경 구절들입니다.",
        'results': serialize(result, SUMMARY_FIELDS),
        'count': len(result)
    })


@bible_bp.route('/popular', methods=['GET'])
def popular_verses():
    limit = limit_arg(10, SEARCH_MAX_LIMIT)
    result = get_service().get_popular_verses(limit)
    if not result.ok:
        return store_unavailable()

    return jsonify({
        'success': True,
        'message': '많이 사용된 성경 구절들입니다.',
        'results': serialize(result, SUMMARY_FIELDS | {'usage_count'}),
        'count': len(result)
    })


@bible_bp.route('/random', methods=['GET'])
def random_verses():
    category = request.args.get('category') or None
    limit = limit_arg(5, RECOMMEND_MAX_LIMIT)
    result = get_service().get_random_verses(category=category, limit=limit)
    if not result.ok:
        return store_unavailable()

    return jsonify({
        'success': True,
        'category': category or 'all',
        'message': '무작위로 선택된 성경 구절들입니다.',
        'results': serialize(result, SUMMARY_FIELDS),
        'count': len(result)
    })


@bible_bp.route('/verse/<reference>', methods=['GET'])
def single_verse(reference):
    result = get_service().get_verse(reference)
    if not result.ok:
        return store_unavailable()
    if not result:
        return error_response('not_found', 404, '해당 성경 구절을 찾을 수 없습니다.')

    return jsonify({
        'success': True,
        'verse': result[0].model_dump(mode='json', exclude={'last_used'})
    })


@bible_bp.route('/stats', methods=['GET'])
def stats():
    data = get_service().get_stats()
    if data is None:
        return store_unavailable()
    return jsonify({'success': True, 'stats': data})


@bible_bp.route('/options', methods=['GET'])
def options():
    data = get_service().get_options()
    if data is None:
        return store_unavailable()
    return jsonify({'success': True, 'options': data})
