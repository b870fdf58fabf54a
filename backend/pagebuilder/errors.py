from flask import current_app, jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException
from pagebuilder.domain.exceptions import PageBuilderError


def register_error_handlers(app):
    @app.errorhandler(PageBuilderError)
    def handle_page_builder_error(error):
        if error.status_code >= 500:
            current_app.logger.error("%s: %s %s", type(error).__name__, error.message, error.context)
        response = jsonify(error.to_dict())
        response.status_code = error.status_code
        return response

    @app.errorhandler(SQLAlchemyError)
    def handle_storage_failure(error):
        current_app.logger.exception("Storage failure")
        response = jsonify({
            "error": "StorageFailure",
            "message": "The operation could not be completed; it can be retried"
        })
        response.status_code = 500
        return response

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        response = jsonify({
            "error": error.name,
            "message": error.description
        })
        response.status_code = error.code
        return response
