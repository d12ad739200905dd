import logging

from flask import jsonify
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException, InternalServerError

logger = logging.getLogger(__name__)


def validation_error_body(error):
    first = error.errors()[0]
    field = '.'.join(str(part) for part in first.get('loc', ()))
    body = {'message': first.get('msg', 'Invalid request')}
    if field:
        body['field'] = field
    return body


def register_error_handlers(app):
    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        return jsonify(validation_error_body(e)), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({'message': e.description or e.name}), e.code

    @app.errorhandler(InternalServerError)
    def handle_internal_error(e):
        original = getattr(e, 'original_exception', None)
        if original is not None:
            logger.error(f"Unhandled error: {original}", exc_info=original)
        return jsonify({'message': 'Internal server error'}), 500
