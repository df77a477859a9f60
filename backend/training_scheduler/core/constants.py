"""Application-wide constants for the training scheduling engine."""

from __future__ import annotations

# Time-of-day buckets a training session can start in. Not user-extensible.
TIME_SLOTS: tuple[str, ...] = (
    "09:00",
    "09:30",
    "10:00",
    "10:30",
    "11:00",
    "11:30",
    "14:00",
    "14:30",
    "15:00",
    "15:30",
    "16:00",
    "16:30",
)

# Hardware delivery time by state, in business days
DEFAULT_DELIVERY_TIME_BY_STATE: dict[str, dict[str, int]] = {
    "Johor": {"min": 3, "max": 5},
    "Kedah": {"min": 3, "max": 5},
    "Kelantan": {"min": 3, "max": 5},
    "Kuala Lumpur": {"min": 1, "max": 1},
    "Labuan": {"min": 5, "max": 7},
    "Malacca": {"min": 3, "max": 5},
    "Negeri Sembilan": {"min": 3, "max": 5},
    "Pahang": {"min": 3, "max": 5},
    "Penang": {"min": 3, "max": 5},
    "Perak": {"min": 3, "max": 5},
    "Perlis": {"min": 3, "max": 5},
    "Putrajaya": {"min": 1, "max": 1},
    "Sabah": {"min": 5, "max": 7},
    "Sarawak": {"min": 5, "max": 7},
    "Selangor": {"min": 1, "max": 1},
    "Terengganu": {"min": 3, "max": 5},
}
FALLBACK_DELIVERY_TIME: dict[str, int] = {"min": 3, "max": 5}

# Training must start at least this many business days after installation
TRAINING_DAYS_AFTER_INSTALLATION = 1

# Query limits
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
