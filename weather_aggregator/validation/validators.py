import math
from typing import List, Optional, Tuple

LAT_RANGE = (-90.0, 90.0)
LON_RANGE = (-180.0, 180.0)


class CoordinateBindError(ValueError):
    """A coordinate is missing or cannot be parsed as a number."""


class CoordinateValidationError(ValueError):
    def __init__(self, errors: List[dict]):
        self.errors = errors
        super().__init__("; ".join(error['message'] for error in errors))


def parse_coordinate(raw: Optional[str], field: str) -> float:
    if raw is None or not str(raw).strip():
        raise CoordinateBindError(f"{field} is required")
    try:
        return float(str(raw).strip())
    except (TypeError, ValueError):
        raise CoordinateBindError(f"{field} must be a number, got '{raw}'") from None


def _check_range(value: float, field: str, bounds: Tuple[float, float], kind: str) -> Optional[dict]:
    low, high = bounds
    if math.isfinite(value) and low <= value <= high:
        return None
    return {
        'field': field,
        'value': value if math.isfinite(value) else str(value),
        'tag': kind,
        'message': f"{field} must be a valid {kind} between {low:g} and {high:g} degrees"
    }


def validate_coordinates(lat_raw: Optional[str], lon_raw: Optional[str]) -> Tuple[float, float]:
    lat = parse_coordinate(lat_raw, 'lat')
    lon = parse_coordinate(lon_raw, 'lon')

    errors = [
        error for error in (
            _check_range(lat, 'lat', LAT_RANGE, 'latitude'),
            _check_range(lon, 'lon', LON_RANGE, 'longitude'),
        ) if error
    ]
    if errors:
        raise CoordinateValidationError(errors)
    return lat, lon
