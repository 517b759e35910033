from .validators import (
    CoordinateBindError,
    CoordinateValidationError,
    parse_coordinate,
    validate_coordinates
)

__all__ = [
    'CoordinateBindError',
    'CoordinateValidationError',
    'parse_coordinate',
    'validate_coordinates'
]
