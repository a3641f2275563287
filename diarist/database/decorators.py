#!/usr/bin/env python3
"""
decorators.py
--------------------
Shared decorators for entry store operations.
"""
from datetime import datetime
from functools import wraps
from typing import Callable

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from diarist.core.exceptions import DatabaseError
from diarist.core.logging_manager import safe_logger


def log_database_operation(operation_name: str):
    """
    Decorator to log store operations with timing and context.

    Expects the decorated method's instance to expose ``logger``.

    Args:
        operation_name: Name of the operation being logged

    Returns:
        Decorator function
    """

    def decorator(function: Callable) -> Callable:
        @wraps(function)
        def wrapper(self, *args, **kwargs):
            start_time = datetime.now()
            operation_id = f"{operation_name}_{start_time.strftime('%Y%m%d_%H%M%S_%f')}"
            logger = safe_logger(getattr(self, "logger", None))

            logger.log_debug(
                f"Starting {operation_name}",
                {"operation_id": operation_id, "args_count": len(args)},
            )

            try:
                result = function(self, *args, **kwargs)
            except Exception as e:
                logger.log_error(
                    e,
                    {
                        "operation": operation_name,
                        "operation_id": operation_id,
                        "duration_seconds": (datetime.now() - start_time).total_seconds(),
                    },
                )
                raise

            logger.log_operation(
                f"{operation_name}_completed",
                {
                    "operation_id": operation_id,
                    "duration_seconds": (datetime.now() - start_time).total_seconds(),
                    "success": True,
                },
            )
            return result

        return wrapper

    return decorator


def handle_db_errors(function: Callable) -> Callable:
    """
    Decorator translating SQLAlchemy errors into DatabaseError.

    Non-SQLAlchemy exceptions (ContentIntegrityError, ...) pass through.
    """

    @wraps(function)
    def wrapper(*args, **kwargs):
        try:
            return function(*args, **kwargs)
        except IntegrityError as e:
            raise DatabaseError(f"Data integrity violation: {e}") from e
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database operation failed: {e}") from e

    return wrapper
