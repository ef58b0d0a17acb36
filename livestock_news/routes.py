"""
Flask Routes for Livestock News Finder

Includes:
- Keyword search across all news sources
- Health check endpoint
- Webhook relay (Zapier proxy)
"""

import logging
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, request

from livestock_news.services.aggregator import run_search
from livestock_news.services.text_matcher import clean_keywords
from livestock_news.services.webhook_proxy import (
    WebhookRelayError,
    relay_webhook,
    validate_webhook_url,
)

logger = logging.getLogger(__name__)

# Create blueprint
main = Blueprint('main', __name__, url_prefix='/api')


@main.route('/health')
def health_check():
    """Health check endpoint. No dependency checks."""
    return {'status': 'OK', 'timestamp': datetime.now(timezone.utc).isoformat()}


@main.route('/search', methods=['POST'])
def search():
    """
    Search all sources for articles matching the given keywords.

    Body: {"keywords": ["bluetongue", "sheep"]}
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not isinstance(data.get('keywords'), list):
        return jsonify({'success': False, 'error': 'Keywords array is required'}), 400

    try:
        keywords = clean_keywords(data['keywords'])
    except ValueError as e:
        return jsonify({'success': False, 'error': str(e)}), 400

    logger.info(f"Searching for keywords: {keywords}")

    try:
        result = run_search(keywords, adapters=current_app.config.get('NEWS_ADAPTERS'))
    except Exception as e:
        logger.error(f"Error in search endpoint: {e}", exc_info=True)
        return jsonify({
            'success': False,
            'error': 'Failed to fetch articles',
            'message': str(e),
        }), 500

    logger.info(f"Found {result.count} articles")
    return jsonify(result.to_dict())


@main.route('/zapier-proxy', methods=['POST'])
def zapier_proxy():
    """
    Relay a payload to a webhook URL on behalf of the browser.

    Body: {"webhookUrl": "https://hooks.zapier.com/...", "data": {...}}
    """
    data = request.get_json(silent=True) or {}

    try:
        webhook_url = validate_webhook_url(data.get('webhookUrl'))
    except ValueError as e:
        return jsonify({'success': False, 'error': str(e)}), 400

    try:
        relayed = relay_webhook(
            webhook_url,
            data.get('data'),
            transport=current_app.config.get('WEBHOOK_TRANSPORT'),
        )
    except WebhookRelayError as e:
        logger.error(f"Zapier proxy error: {e}")
        return jsonify({'success': False, 'error': str(e), 'details': e.details}), 500

    return jsonify({'success': True, 'status': relayed['status'], 'data': relayed['data']})
