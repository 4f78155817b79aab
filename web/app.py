"""
Maturity Assessment - Flask application

Hosts the database extension and the assessment service. HTTP controllers
live outside this package; the only route here is the health check.
"""

import logging
from flask import Flask, jsonify

from config.settings import get_config, PipelineSettings
from maturity_ai import __version__
from maturity_ai.database import db
from maturity_ai.assessment.service import AssessmentService

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# =============================================================================
# App Factory
# =============================================================================

def create_app(config_class=None):
    """Create Flask application"""
    app = Flask(__name__)

    # Load configuration
    if config_class is None:
        config_class = get_config()
    app.config.from_object(config_class)

    # Initialize extensions
    db.init_app(app)

    settings = PipelineSettings.from_mapping(app.config)
    app.extensions['assessment_service'] = AssessmentService(settings)

    # Create tables
    with app.app_context():
        db.create_all()
        logger.info("Database tables created")

    @app.route('/health')
    def health():
        """Health check endpoint"""
        return jsonify({
            'status': 'healthy',
            'app': app.config.get('APP_NAME'),
            'version': __version__,
            'analyzer_parallel': settings.analyzer_parallel
        })

    return app


def get_assessment_service(app: Flask) -> AssessmentService:
    return app.extensions['assessment_service']


if __name__ == '__main__':
    app = create_app()
    app.run(debug=app.config.get('DEBUG', False))
