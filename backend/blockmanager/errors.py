from flask import jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException
from blockmanager.domain.invariants.exceptions import InvariantViolation
from blockmanager.application.blocks.exceptions import BlockPersistenceError, BlockValidationError

def register_error_handlers(app):
    @app.errorhandler(InvariantViolation)
    def handle_invariant_violation(error):
        response = jsonify({
            "error": "InvariantViolation",
            "message": str(error)
        })
        response.status_code = 400
        return response

    @app.errorhandler(BlockValidationError)
    def handle_validation_error(error):
        response = jsonify({
            "error": "ValidationError",
            "message": str(error),
            "errors": error.errors
        })
        response.status_code = 400
        return response

    @app.errorhandler(BlockPersistenceError)
    def handle_persistence_error(error):
        response = jsonify({
            "error": "PersistenceError",
            "message": str(error)
        })
        response.status_code = 409
        return response

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        current_app.logger.error(f"Database error: {error}")
        response = jsonify({
            "error": "DatabaseError",
            "message": "Your information could not be saved, please try again."
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
