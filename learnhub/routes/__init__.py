from werkzeug.routing import IntegerConverter

from ..schemas import MAX_DB_INT
from .auth import auth_bp
from .modules import modules_bp
from .progress import progress_bp
from .doubts import doubts_bp
from .quizzes import quizzes_bp
from .chat import chat_bp

blueprints = (auth_bp, modules_bp, progress_bp, doubts_bp, quizzes_bp, chat_bp)


class RecordIdConverter(IntegerConverter):
    """``<id:...>`` URL segment: a positive integer that fits an Integer column."""

    def __init__(self, map, **kwargs):
        kwargs.setdefault('min', 1)
        kwargs.setdefault('max', MAX_DB_INT)
        super().__init__(map, **kwargs)


def register_blueprints(app):
    # Converters must exist before any rule that uses them is added
    app.url_map.converters['id'] = RecordIdConverter
    for blueprint in blueprints:
        app.register_blueprint(blueprint, url_prefix='/api')
