"""
API Route Handlers for the lobby session engine.

Pure routing layer for the few plain HTTP endpoints the server offers.
Contains no lobby logic - only request/response handling.
"""

import logging
from flask import jsonify

logger = logging.getLogger(__name__)

def register_api_handlers(app, registry):
    """
    Register all API route handlers.
    
    Args:
        app: Flask application instance
        registry: Lobby registry instance
    """

    @app.route('/health')
    @app.route('/api/health')
    def health_check():
        """Health check endpoint."""
        return jsonify({'status': 'ok'})

    @app.route('/api/stats')
    def get_stats():
        """Active lobby and member counts."""
        try:
            return jsonify(registry.get_stats())
            
        except Exception as e:
            logger.error(f"Error getting statistics: {e}")
            return jsonify({'error': 'Failed to get statistics'}), 500

    # Error handlers
    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 errors."""
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        return jsonify({'error': 'Internal server error'}), 500
    
    logger.info("API handlers registered successfully")
