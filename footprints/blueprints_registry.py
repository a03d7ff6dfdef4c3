import logging

logger = logging.getLogger(__name__)

BLUEPRINTS = (
    ('footprints.blueprints.core.routes', 'core_bp', None, 'Core'),
    ('footprints.blueprints.api.routes', 'api_bp', None, 'Buildings API'),
)


def register_blueprints(app):
    """Register all blueprints with the Flask app."""
    registered = []
    for module_path, bp_name, url_prefix, description in BLUEPRINTS:
        module = __import__(module_path, fromlist=[bp_name])
        blueprint = getattr(module, bp_name)
        if url_prefix:
            app.register_blueprint(blueprint, url_prefix=url_prefix)
        else:
            app.register_blueprint(blueprint)
        registered.append(description)
    logger.debug("Registered blueprints: %s", ", ".join(registered))
