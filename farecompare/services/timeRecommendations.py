"""Advisory "best time to ride" tips, chosen from broad time-of-day bands."""

from __future__ import annotations

from datetime import datetime

OFF_PEAK_TIPS = [
    "Great timing! You're booking during off-peak hours",
    "Best prices are typically 2-4 PM (avoid rush hours for savings)",
]

MORNING_RUSH_TIPS = [
    "Rush hour pricing in effect. Expect 15-25% increase over standard rates",
    "Best prices: 2-4 PM (avoid peak hours for savings)",
]

EVENING_RUSH_TIPS = [
    "Evening rush pricing. Consider waiting until after 8 PM for better rates",
    "Best prices: 2-4 PM (avoid peak hours for savings)",
]

LATE_NIGHT_TIPS = [
    "Late night premium in effect (up to 20% increase)",
    "Best prices: 2-4 PM (avoid peak hours for savings)",
]

DEFAULT_TIPS = [
    "Best prices: 2-4 PM (avoid peak hours for savings)",
    "Avoid rush hours: 7-9 AM and 5-7 PM (up to 25% increase)",
]


def get_best_time_recommendations(now: datetime) -> list[str]:
    """Return two tips for the hour of ``now``; bands are checked in order."""
    hour = now.hour

    if 14 <= hour <= 16:
        tips = OFF_PEAK_TIPS
    elif 7 <= hour <= 9:
        tips = MORNING_RUSH_TIPS
    elif 17 <= hour <= 19:
        tips = EVENING_RUSH_TIPS
    elif hour >= 20 or hour <= 5:
        tips = LATE_NIGHT_TIPS
    else:
        tips = DEFAULT_TIPS

    return list(tips)
