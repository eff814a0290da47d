"""Application-wide constants for the studio platform."""

from __future__ import annotations

BRAND_NAME = "Studio"

# API metadata
API_TITLE = f"{BRAND_NAME} API"
API_DESCRIPTION = "Bookings, giftcards, timecards and deliveries for the pottery studio"
API_VERSION = "1.0.0"

# Query limits
DEFAULT_QUERY_LIMIT = 100
MAX_QUERY_LIMIT = 1000

# Day of week mapping (Monday == 0, matching date.weekday())
DAYS_OF_WEEK = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

# Seats per capacity pool
DEFAULT_CLASS_CAPACITY = {
    "potters_wheel": 8,
    "molding": 22,
    "introductory_class": 8,
}

# Extra introductory wheel sessions opened for groups (weekday index, "HH:MM")
INTRO_WHEEL_GROUP_SLOTS = [(1, "19:00"), (2, "11:00")]
INTRO_WHEEL_GROUP_MIN_PARTICIPANTS = 2

# Product name keywords mapped to techniques (checked in order)
TECHNIQUE_KEYWORDS = [
    ("pintura", "painting"),
    ("torno", "potters_wheel"),
    ("modelado", "hand_modeling"),
]

# Studio settings keys
SETTING_WEEKLY_AVAILABILITY = "weekly_availability"
SETTING_SCHEDULE_OVERRIDES = "schedule_overrides"
SETTING_CLASS_CAPACITY = "class_capacity"

# Timecard CSV export
TIMECARD_CSV_HEADER = ["Código", "Nombre", "Puesto", "Fecha", "Entrada", "Salida", "Horas"]
