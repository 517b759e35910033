def coordinate_key(lat: float, lon: float) -> str:
    """Fingerprint used for both the forecast cache and the coalescing table."""
    return f"{lat:.6f},{lon:.6f}"
