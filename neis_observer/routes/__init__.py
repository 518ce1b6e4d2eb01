"""
NEIS Observer API Routes
========================

All API route blueprints for the NEIS Observer application.

Usage:
    from neis_observer.routes import register_routes
    register_routes(app)
"""
from .settings_routes import settings_bp
from .conversion_routes import conversion_bp, init_conversion_routes


def register_routes(app, conversion_state=None, run_conversion_fn=None, reset_fn=None):
    """Register all route blueprints with the Flask app."""

    # Initialize conversion routes with state references if provided
    if conversion_state is not None:
        init_conversion_routes(conversion_state, run_conversion_fn, reset_fn)

    app.register_blueprint(settings_bp)
    app.register_blueprint(conversion_bp)


__all__ = [
    'register_routes',
    'settings_bp',
    'conversion_bp',
    'init_conversion_routes'
]
