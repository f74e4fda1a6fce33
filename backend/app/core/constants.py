"""Application-wide constants for the TrainerLocator platform."""

from __future__ import annotations

BRAND_NAME = "TrainerLocator"

# API metadata
API_TITLE = f"{BRAND_NAME} API"
API_DESCRIPTION = "Marketplace backend connecting fitness trainers with clients"
API_VERSION = "1.0.0"

# Session duration constraints
MIN_SESSION_DURATION = 15  # minutes
MAX_SESSION_DURATION = 480  # minutes (8 hours)

# Text constraints
MIN_PASSWORD_LENGTH = 6
MAX_BIO_LENGTH = 500
MAX_NAME_LENGTH = 50
MAX_SESSION_NOTES_LENGTH = 1000
MAX_REVIEW_COMMENT_LENGTH = 500
MAX_SPECIAL_REQUESTS_LENGTH = 500

# Rating bounds
MIN_RATING = 1
MAX_RATING = 5

# Trainer specializations accepted on profile creation/update
SPECIALIZATIONS = [
    "Strength Training",
    "Cardio & Weight Loss",
    "Yoga & Flexibility",
    "CrossFit",
    "Bodybuilding",
]

# Weekday keys used by trainer availability (index matches datetime.weekday())
DAYS_OF_WEEK = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

# Nearby search
DEFAULT_NEARBY_RADIUS_KM = 50.0
KM_PER_DEGREE_LATITUDE = 111.0
MAX_NEARBY_RESULTS = 20

# Session considered "upcoming" within this window
UPCOMING_WINDOW_HOURS = 24

DEFAULT_CURRENCY = "USD"
