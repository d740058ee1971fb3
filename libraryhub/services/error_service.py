"""
Error Service for centralized error handling and logging
Provides consistent JSON error responses and role checks for the API blueprints
"""
import logging
import traceback
import uuid
from datetime import datetime
from typing import Dict, Any
from flask import request, jsonify, current_app, has_request_context
from functools import wraps
from werkzeug.exceptions import HTTPException
from sqlalchemy.exc import SQLAlchemyError


error_logger = logging.getLogger('libraryhub.errors')


class ErrorCode:
    """Standard error codes"""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    DATABASE_ERROR = "DATABASE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"
    PAYMENT_EXCEEDS_DUE = "PAYMENT_EXCEEDS_DUE"


class ErrorService:
    """Centralized error handling service"""

    def __init__(self):
        self.logger = error_logger

    def log_error(self, error: Exception, context: Dict[str, Any] = None) -> str:
        """
        Log error with context information

        Args:
            error: Exception object
            context: Additional context information

        Returns:
            Error ID for tracking
        """
        error_id = self._generate_error_id()

        error_info = {
            'error_id': error_id,
            'timestamp': datetime.utcnow().isoformat(),
            'error_type': type(error).__name__,
            'error_message': str(error),
            'context': context or {}
        }

        if has_request_context():
            error_info['request'] = {
                'method': request.method,
                'url': request.url,
                'remote_addr': request.remote_addr
            }

        self.logger.error(f"Error {error_id}: {error_info}", exc_info=error)
        return error_id

    def create_error_response(self,
                              error_code: str,
                              message: str,
                              details: Dict[str, Any] = None,
                              status_code: int = 400) -> tuple:
        """
        Create standardized error response

        Args:
            error_code: Standard error code
            message: Human-readable error message
            details: Additional error details
            status_code: HTTP status code

        Returns:
            Tuple of (response, status_code)
        """
        response_data = {
            'success': False,
            'error': {
                'code': error_code,
                'message': message,
                'timestamp': datetime.utcnow().isoformat()
            }
        }

        if details:
            response_data['error']['details'] = details

        return jsonify(response_data), status_code

    def handle_not_found_error(self, resource: str = "Resource") -> tuple:
        return self.create_error_response(
            ErrorCode.NOT_FOUND,
            f"{resource} not found",
            status_code=404
        )

    def handle_unauthorized_error(self, message: str = "Authentication required") -> tuple:
        return self.create_error_response(
            ErrorCode.UNAUTHORIZED,
            message,
            status_code=401
        )

    def handle_forbidden_error(self, message: str = "Access forbidden") -> tuple:
        return self.create_error_response(
            ErrorCode.FORBIDDEN,
            message,
            status_code=403
        )

    def handle_database_error(self, error: Exception) -> tuple:
        """Handle database errors"""
        error_id = self.log_error(error, {'type': 'database_error'})

        if current_app.debug:
            message = str(error)
        else:
            message = "Database operation failed"

        return self.create_error_response(
            ErrorCode.DATABASE_ERROR,
            message,
            {'error_id': error_id},
            500
        )

    def handle_internal_error(self, error: Exception) -> tuple:
        """Handle internal server errors"""
        error_id = self.log_error(error, {'type': 'internal_error'})

        if current_app.debug:
            message = str(error)
            details = {'error_id': error_id, 'traceback': traceback.format_exc()}
        else:
            message = "Internal server error"
            details = {'error_id': error_id}

        return self.create_error_response(
            ErrorCode.INTERNAL_ERROR,
            message,
            details,
            500
        )

    def _generate_error_id(self) -> str:
        """Generate unique error ID"""
        return str(uuid.uuid4())[:8].upper()


# Global error service instance
error_service = ErrorService()


class APIError(Exception):
    """Custom exception for API errors"""

    def __init__(self, error_code: str, message: str, status_code: int = 400, details: Dict[str, Any] = None):
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class ValidationError(APIError):
    """Raised when request data fails validation"""

    def __init__(self, message: str, errors: Dict[str, Any] = None):
        super().__init__(
            ErrorCode.VALIDATION_ERROR,
            message,
            400,
            {'validation_errors': errors} if errors else None
        )
        self.validation_errors = errors or {}


class PaymentExceedsDueError(APIError):
    def __init__(self, due_amount=None):
        super().__init__(
            ErrorCode.PAYMENT_EXCEEDS_DUE,
            "Payment exceeds due amount",
            400,
            {'due_amount': float(due_amount)} if due_amount is not None else None
        )


class NotFoundError(APIError):
    """Custom exception for not found errors"""

    def __init__(self, resource: str = "Resource", message: str = None):
        super().__init__(
            ErrorCode.NOT_FOUND,
            message or f"{resource} not found",
            404
        )


class ConflictError(APIError):
    def __init__(self, message: str):
        super().__init__(ErrorCode.DUPLICATE_ENTRY, message, 409)


class UnauthorizedError(APIError):
    """Custom exception for unauthorized errors"""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(
            ErrorCode.UNAUTHORIZED,
            message,
            401
        )


class ForbiddenError(APIError):
    """Custom exception for forbidden errors"""

    def __init__(self, message: str = "Access forbidden"):
        super().__init__(
            ErrorCode.FORBIDDEN,
            message,
            403
        )


def handle_errors(func):
    """
    Decorator for automatic error handling in routes

    APIError subclasses propagate to the registered handlers; anything
    unexpected rolls back the session and becomes a logged 500.

    Usage:
        @bp.route('/endpoint')
        @handle_errors
        def endpoint():
            pass
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        from libraryhub import db
        try:
            return func(*args, **kwargs)
        except (APIError, HTTPException):
            db.session.rollback()
            raise
        except ValueError as e:
            db.session.rollback()
            return error_service.create_error_response(
                ErrorCode.INVALID_INPUT,
                str(e),
                status_code=400
            )
        except SQLAlchemyError as e:
            db.session.rollback()
            return error_service.handle_database_error(e)
        except Exception as e:
            db.session.rollback()
            return error_service.handle_internal_error(e)

    return wrapper


# Error handlers for Flask app
def register_error_handlers(app):
    """Register error handlers with Flask app"""

    @app.errorhandler(APIError)
    def handle_api_error(error):
        return error_service.create_error_response(
            error.error_code,
            error.message,
            error.details,
            error.status_code
        )

    @app.errorhandler(404)
    def handle_not_found(error):
        return error_service.handle_not_found_error()

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        return error_service.create_error_response(
            ErrorCode.INVALID_INPUT,
            "Method not allowed",
            status_code=405
        )

    @app.errorhandler(500)
    def handle_internal_server_error(error):
        from libraryhub import db
        db.session.rollback()
        return error_service.handle_internal_error(error)


def require_role(*roles):
    """
    Decorator to require one of the given roles

    Usage:
        @require_role('admin')
        def admin_only():
            pass
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            from flask_login import current_user

            if not current_user.is_authenticated:
                raise UnauthorizedError()

            if current_user.role not in roles:
                raise ForbiddenError(f"Role {' or '.join(roles)} required")

            return func(*args, **kwargs)
        return wrapper
    return decorator


admin_required = require_role('admin')
admin_or_staff_required = require_role('admin', 'staff')
