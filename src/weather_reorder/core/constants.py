"""
Application-wide constants for weather-driven reorder recommendations.

This module defines default values and constants used throughout the application.
Demand rule thresholds and multipliers live next to the rules that use them.
"""

# Service names
WEATHER_SERVICE = "weather"

# Environments
ENVIRONMENT_DEVELOPMENT = "development"
ENVIRONMENT_PRODUCTION = "production"
DEFAULT_ENVIRONMENT = ENVIRONMENT_DEVELOPMENT

# Weather provider (OpenWeatherMap free tier)
DEFAULT_WEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5"
DEFAULT_WEATHER_TIMEOUT = 10  # seconds
DEFAULT_WEATHER_UNITS = "imperial"
DEFAULT_LOCATION = "New York"

# Per-environment service limits
# production leaves a buffer under the provider's 1000 calls/hour quota
DEFAULT_SERVICE_ENVIRONMENTS = {
    ENVIRONMENT_DEVELOPMENT: {
        "hourly_rate_limit": 60,
        "cache_ttl_seconds": 5 * 60,
        "retry_attempts": 2,
    },
    ENVIRONMENT_PRODUCTION: {
        "hourly_rate_limit": 800,
        "cache_ttl_seconds": 10 * 60,
        "retry_attempts": 3,
    },
}

# Sliding window for rate limiting
RATE_LIMIT_WINDOW_SECONDS = 60 * 60

# Forecast reduction: 3-hour samples, 8 per day
FORECAST_SAMPLES_PER_DAY = 8
FORECAST_DAYS = 5

# Characters stripped from user-supplied locations
UNSAFE_INPUT_CHARACTERS = "<>'\"&"

# Heat index (Rothfusz regression, NOAA)
HEAT_INDEX_MIN_TEMP_F = 80.0
HEAT_INDEX_MIN_HUMIDITY = 40.0
ROTHFUSZ_C1 = -42.379
ROTHFUSZ_C2 = 2.04901523
ROTHFUSZ_C3 = 10.14333127
ROTHFUSZ_C4 = -0.22475541
ROTHFUSZ_C5 = -6.83783e-3
ROTHFUSZ_C6 = -5.481717e-2
ROTHFUSZ_C7 = 1.22874e-3
ROTHFUSZ_C8 = 8.5282e-4
ROTHFUSZ_C9 = -1.99e-6

# Simulated weather (used when no API key is configured)
SEASONAL_BASE_TEMPS_F = {
    "winter": 35.0,  # Dec-Feb
    "spring": 65.0,  # Mar-May
    "summer": 85.0,  # Jun-Aug
    "fall": 60.0,  # Sep-Nov
}
SIMULATED_CONDITIONS = ("Clear", "Clouds", "Rain")
DIURNAL_AMPLITUDE_F = 15.0
SIMULATED_JITTER_F = 10.0
SIMULATED_HUMIDITY_RANGE = (40, 80)
SIMULATED_HIGH_SPREAD_F = 20.0
SIMULATED_LOW_OFFSET_F = 15.0
SIMULATED_LOW_SPREAD_F = 10.0

# Catalog category ids
CATEGORY_ALL = "All Categories"
CATEGORY_IDS = {
    "Beer": 1,
    "Wine": 2,
    "Spirits": 3,
}
BEER_NAME_KEYWORDS = ("beer", "budweiser", "stella", "heineken")

# Reorder generation
MAX_PRODUCTS_PER_FORECAST = 5
FALLBACK_PRODUCT_COUNT = 3
DEFAULT_STOCK_RANGE = (15, 39)  # inclusive
DEFAULT_PAR_RANGE = (30, 69)  # inclusive
HIGH_PRIORITY_MULTIPLIER = 1.3
DEFAULT_REVENUE_PER_UNIT = 25.0
DEFAULT_MAX_SUGGESTIONS = 10
