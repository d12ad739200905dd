import logging

from flask import Flask

from .config import config_for_env
from .extensions import db, login_manager

logger = logging.getLogger(__name__)


def create_app(config_object=None, overrides=None):
    app = Flask(__name__)
    app.config.from_object(config_object or config_for_env())
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    )

    db.init_app(app)
    login_manager.init_app(app)

    from . import models  # noqa: F401
    from .cli import register_commands
    from .errors import register_error_handlers
    from .routes import register_blueprints
    from .seed import seed_demo_users
    from .services.assistant import Assistant

    app.extensions['assistant'] = Assistant.from_config(app.config)

    register_blueprints(app)
    register_error_handlers(app)
    register_commands(app)

    with app.app_context():
        db.create_all()
        if app.config.get('SEED_DEMO_USERS'):
            seed_demo_users()

    if not app.config.get('LLM_MODEL_PATH'):
        logger.warning("LLM_MODEL_PATH is not set, doubts will be escalated to teachers")
    logger.info("LearnHub app created")
    return app
