"""
Constants for the Lambda cost model.
Pricing and memory sizing thresholds.
"""

# Lambda pricing (US East 1, first tier only)
REQUEST_PRICE_PER_MILLION = 0.20
REQUESTS_PER_MILLION = 1_000_000
GB_SECOND_PRICE = {
    "arm64": 0.0000133334,
    "x86_64": 0.0000166667,
}
DEFAULT_GB_SECOND_PRICE = GB_SECOND_PRICE["x86_64"]
OPTIMIZED_ARCHITECTURE = "arm64"

MB_PER_GB = 1024

# Memory sizing
MIN_OPTIMIZED_MEMORY_MB = 1024  # Functions at or below this size are not resized
MEMORY_HEADROOM_FACTOR = 2  # Recommend twice the observed peak
MEMORY_STEP_MB = 256  # Recommendations are rounded down to this increment

DAYS_PER_MONTH = 30

if __name__ == "__main__":
    pass
