"""Shared constants for the configuration module.

Kept apart from settings.py so that modules needing only the defaults do
not pull in pydantic-settings.
"""

# Per-axis tolerance around the species ideal value
BRIGHTNESS_SLACK = 0.5
TEMPERATURE_SLACK = 2.0  # Celsius
HUMIDITY_SLACK = 5.0  # %

# Soil moisture bands (%), OKAY is inclusive of both boundaries
MOISTURE_TOO_DRY_BELOW = 30.0
MOISTURE_TOO_WET_ABOVE = 80.0

# Number of most recent moisture samples averaged per plant
MOISTURE_WINDOW = 10

# Notification channel is "<prefix>/<tenant id>"
TOPIC_PREFIX = "plant-conditions"
