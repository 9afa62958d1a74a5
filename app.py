import sys
import os
import logging

# Set up root logger for startup diagnostics
root_logger = logging.getLogger()
root_logger.setLevel(logging.INFO)
if not root_logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
    root_logger.addHandler(handler)

root_logger.info("App starting up - Python version: %s", sys.version)

import datetime
from flask import Flask, request, jsonify
from werkzeug.exceptions import HTTPException

from post_search.models import Post, ValidationError, PostSearchError
from post_search.matching import FuzzyMatcher
from post_search.filtering import PostFilter
from post_search.config import get_config_manager, SettingsValidator

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config['MAX_CONTENT_LENGTH'] = 5 * 1024 * 1024  # 5 MB limit


def load_settings():
    """Load search settings, logging any validation problems."""
    settings = get_config_manager().load_search_settings()
    validation = SettingsValidator().validate(settings)
    for warning in validation.warnings:
        logger.warning(f"Search settings: {warning}")
    if not validation.is_valid:
        logger.error(f"Search settings invalid: {validation.errors}")
    return settings


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.")
    return data


def _string_list(data, key):
    values = data.get(key)
    if values is None:
        return []
    if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
        raise ValidationError(f"'{key}' must be a list of strings.")
    return values


def _optional_number(data, key):
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"'{key}' must be a number.")
    return value


def _optional_int(data, key):
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"'{key}' must be an integer.")
    return value


@app.errorhandler(ValidationError)
def handle_validation_error(e):
    logger.warning(f"{request.path}: validation failed: {e}")
    return jsonify({"success": False, "message": str(e)}), 400


@app.errorhandler(PostSearchError)
def handle_post_search_error(e):
    logger.error(f"{request.path}: {e}", exc_info=True)
    return jsonify({"success": False, "message": str(e)}), 500


@app.errorhandler(Exception)
def handle_unexpected_error(e):
    if isinstance(e, HTTPException):
        return e
    logger.error(f"{request.path}: unexpected error: {e}", exc_info=True)
    return jsonify({"success": False, "message": f"Internal error: {e}"}), 500


@app.route('/search', methods=['POST'])
def search_route():
    """Fuzzy search a list of candidate strings."""
    data = _json_body()
    query = data.get('query')
    if query is not None and not isinstance(query, str):
        raise ValidationError("'query' must be a string.")
    candidates = _string_list(data, 'candidates')

    settings = load_settings()
    threshold = _optional_number(data, 'threshold')
    if threshold is None:
        threshold = settings.similarity_threshold

    matcher = FuzzyMatcher(settings.similarity_threshold)
    if data.get('include_scores'):
        matches = [r.to_dict() for r in matcher.rank_fuzzy_search_matches(query, candidates, threshold)]
    else:
        matches = matcher.find_fuzzy_search_matches(query, candidates, threshold)

    logger.info(f"/search: '{query}' matched {len(matches)}/{len(candidates)} candidates")
    return jsonify({"success": True, "matches": matches})


@app.route('/similarity', methods=['POST'])
def similarity_route():
    """Levenshtein similarity of two strings."""
    data = _json_body()
    source = data.get('source', "")
    target = data.get('target', "")
    if not isinstance(source, str) or not isinstance(target, str):
        raise ValidationError("'source' and 'target' must be strings.")

    similarity = FuzzyMatcher().levenshtein_similarity(source, target)
    return jsonify({"success": True, "similarity": similarity})


@app.route('/posts/search', methods=['POST'])
def posts_search_route():
    """Filter, search and page a list of posts."""
    data = _json_body()
    raw_posts = data.get('posts') or []
    if not isinstance(raw_posts, list):
        raise ValidationError("'posts' must be a list.")
    try:
        posts = [Post.from_dict(p) for p in raw_posts]
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ValidationError(f"Invalid post data: {e}")

    filter_text = data.get('filter_text')
    if filter_text is not None and not isinstance(filter_text, str):
        raise ValidationError("'filter_text' must be a string.")

    page_number = _optional_int(data, 'page')
    if page_number is None:
        page_number = 1

    settings = load_settings()
    post_filter = PostFilter(settings=settings)
    page = post_filter.get_filtered_posts(
        posts,
        category_id=_optional_int(data, 'category_id'),
        selected_hashtags=_string_list(data, 'hashtags'),
        filter_text=filter_text,
        current_page=page_number,
        items_per_page=_optional_int(data, 'items_per_page')
    )
    return jsonify({"success": True, **page.to_dict()})


@app.route('/settings', methods=['GET'])
def settings_route():
    """Current search settings and their validation status."""
    settings = load_settings()
    return jsonify({
        "settings": settings.to_dict(),
        "validation": SettingsValidator().validate(settings).to_dict(),
        "config": get_config_manager().get_config_info()
    })


@app.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint - simplest possible successful response."""
    return "", 200


@app.route('/healthz', methods=['GET'])
def detailed_health_check():
    """Detailed health check endpoint for monitoring."""
    try:
        settings = load_settings()
        validation = SettingsValidator().validate(settings)
        health_ok = validation.is_valid

        return jsonify({
            "status": "healthy" if health_ok else "degraded",
            "timestamp": datetime.datetime.now().isoformat(),
            "checks": {
                "settings": "ok" if health_ok else "error"
            },
            "similarity_threshold": settings.similarity_threshold
        }), 200 if health_ok else 503
    except PostSearchError as e:
        logger.error(f"Health check failed: {e}", exc_info=True)
        return jsonify({
            "status": "unhealthy",
            "timestamp": datetime.datetime.now().isoformat(),
            "error": str(e)
        }), 500


if __name__ == "__main__":
    port = int(os.environ.get('PORT', 8080))
    logger.info(f"Starting post search server on port {port}")
    app.run(host='0.0.0.0', port=port)
