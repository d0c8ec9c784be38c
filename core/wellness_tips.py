# core/wellness_tips.py
"""
Static wellness tip catalog and cooldowns.
General wellness information only, not medical advice.
"""

from typing import Any, Dict, List

PATTERN_TYPES = [
    "consecutive_type_1_2",   # hard stools
    "consecutive_type_6_7",   # loose stools
    "irregular_timing",
    "no_entries_days",
    "consistent_healthy",     # types 3-4
    "coffee_correlation",
    "stress_correlation",
    "fiber_improvement",
    "hydration_correlation",
    "morning_routine",
    "general",
]

# ranking key, lower wins
PATTERN_PRIORITY = {
    "consecutive_type_6_7": 1,
    "consecutive_type_1_2": 2,
    "no_entries_days": 3,
    "stress_correlation": 4,
    "coffee_correlation": 5,
    "hydration_correlation": 6,
    "irregular_timing": 7,
    "fiber_improvement": 8,
    "consistent_healthy": 9,
    "morning_routine": 10,
    "general": 11,
}

HOUR_MS = 60 * 60 * 1000
DAY_MS = 24 * HOUR_MS

TIP_COOLDOWNS = {
    "sameTip": 7 * DAY_MS,
    "anyTip": DAY_MS,
    "afterDismiss": 3 * DAY_MS,
    "snooze": 12 * HOUR_MS,
}

MIN_ENTRIES_FOR_TIPS = 3

WELLNESS_DISCLAIMER = (
    "General wellness info only, not medical advice. "
    "Consult a doctor for health concerns."
)

WELLNESS_TIPS: List[Dict[str, Any]] = [
    # ---------------- Hard stools ----------------
    {
        "id": "constipation_hydration",
        "patternType": "consecutive_type_1_2",
        "title": "Stay Hydrated",
        "message": "Your recent logs suggest harder stools. Drinking 8+ glasses of water daily can help soften stool and improve regularity.",
        "source": "Mayo Clinic",
        "priority": "high",
        "minEntriesRequired": 3,
    },
    {
        "id": "constipation_fiber",
        "patternType": "consecutive_type_1_2",
        "title": "Fiber Power",
        "message": "Adding more fiber (fruits, vegetables, whole grains) can help. Aim for 25-30g daily for better bowel movements.",
        "source": "Harvard Health",
        "priority": "high",
        "minEntriesRequired": 3,
    },
    {
        "id": "constipation_movement",
        "patternType": "consecutive_type_1_2",
        "title": "Move Your Body",
        "message": "Physical activity stimulates intestinal contractions. Even a 15-minute walk can help improve digestion.",
        "source": "Gastroenterology Research",
        "priority": "medium",
        "minEntriesRequired": 4,
    },
    # ---------------- Loose stools ----------------
    {
        "id": "diarrhea_hydration",
        "patternType": "consecutive_type_6_7",
        "title": "Replace Fluids",
        "message": "Loose stools can lead to dehydration. Drink water, clear broths, or oral rehydration solutions to stay balanced.",
        "source": "WHO Guidelines",
        "priority": "high",
        "minEntriesRequired": 2,
    },
    {
        "id": "diarrhea_brat",
        "patternType": "consecutive_type_6_7",
        "title": "Gentle Foods",
        "message": "Consider easily digestible foods like bananas, rice, applesauce, and toast (BRAT diet) until things settle.",
        "source": "Cleveland Clinic",
        "priority": "medium",
        "minEntriesRequired": 2,
    },
    {
        "id": "diarrhea_triggers",
        "patternType": "consecutive_type_6_7",
        "title": "Identify Triggers",
        "message": "Track what you eat before loose stools. Common triggers include dairy, caffeine, and artificial sweeteners.",
        "source": "Johns Hopkins Medicine",
        "priority": "medium",
        "minEntriesRequired": 3,
    },
    # ---------------- Timing ----------------
    {
        "id": "irregular_routine",
        "patternType": "irregular_timing",
        "title": "Establish a Routine",
        "message": "Your bowel habits seem irregular. Try going at the same time daily. Your body loves predictability!",
        "source": "Gut Health Studies",
        "priority": "low",
        "minEntriesRequired": 7,
    },
    {
        "id": "morning_routine",
        "patternType": "morning_routine",
        "title": "Morning Rhythm",
        "message": "Your gut seems to prefer mornings. A warm drink and a relaxed breakfast help keep that rhythm going.",
        "priority": "low",
        "minEntriesRequired": 7,
    },
    # ---------------- Engagement ----------------
    {
        "id": "no_entries_check",
        "patternType": "no_entries_days",
        "title": "How Are You Doing?",
        "message": "We haven't seen a log in a while. Regular tracking helps identify patterns that matter for your health.",
        "priority": "low",
        "minEntriesRequired": 0,
    },
    # ---------------- Healthy ----------------
    {
        "id": "healthy_streak",
        "patternType": "consistent_healthy",
        "title": "Great Job!",
        "message": "Your recent logs show healthy Type 3-4 stools. Whatever you're doing, keep it up!",
        "priority": "low",
        "minEntriesRequired": 5,
    },
    {
        "id": "healthy_maintain",
        "patternType": "consistent_healthy",
        "title": "Consistency Wins",
        "message": "A healthy gut thrives on routine. Maintain your fiber intake and hydration for continued success.",
        "priority": "low",
        "minEntriesRequired": 7,
    },
    # ---------------- Tag correlations ----------------
    {
        "id": "coffee_loose",
        "patternType": "coffee_correlation",
        "title": "Coffee Connection",
        "message": "We noticed caffeine appears often with looser stools. Coffee can speed up digestion in some people.",
        "source": "European Journal of Gastroenterology",
        "priority": "medium",
        "minEntriesRequired": 5,
    },
    {
        "id": "stress_effect",
        "patternType": "stress_correlation",
        "title": "Stress & Digestion",
        "message": "Your logs show stress may be affecting your gut. The brain-gut connection is real, so try relaxation techniques.",
        "source": "Harvard Medical School",
        "priority": "medium",
        "minEntriesRequired": 4,
    },
    {
        "id": "fiber_positive",
        "patternType": "fiber_improvement",
        "title": "Fiber Is Working!",
        "message": "Days with fiber intake correlate with healthier stools in your log. Great dietary choice!",
        "priority": "low",
        "minEntriesRequired": 5,
    },
    {
        "id": "hydration_link",
        "patternType": "hydration_correlation",
        "title": "Water Helps",
        "message": "Your hydrated days line up with easier stools. Keep a bottle nearby to make it a habit.",
        "priority": "medium",
        "minEntriesRequired": 5,
    },
    # ---------------- General ----------------
    {
        "id": "general_water",
        "patternType": "general",
        "title": "Hydration Reminder",
        "message": "Drinking enough water is key to digestive health. Aim for 8 glasses throughout the day.",
        "priority": "low",
        "minEntriesRequired": 0,
    },
    {
        "id": "general_fiber",
        "patternType": "general",
        "title": "Fiber Facts",
        "message": "Most adults only get half the recommended fiber. Add one extra serving of vegetables today!",
        "priority": "low",
        "minEntriesRequired": 0,
    },
    {
        "id": "general_movement",
        "patternType": "general",
        "title": "Keep Moving",
        "message": "Regular exercise supports healthy digestion. Even short walks after meals can help.",
        "priority": "low",
        "minEntriesRequired": 0,
    },
    {
        "id": "general_sleep",
        "patternType": "general",
        "title": "Rest Well",
        "message": "Poor sleep can affect gut health. Aim for 7-9 hours for optimal digestive function.",
        "source": "Sleep Foundation",
        "priority": "low",
        "minEntriesRequired": 0,
    },
    {
        "id": "general_probiotics",
        "patternType": "general",
        "title": "Gut Friendly Foods",
        "message": "Fermented foods like yogurt, kefir, and kimchi contain beneficial probiotics for gut health.",
        "priority": "low",
        "minEntriesRequired": 0,
    },
]


def tip_by_id(tip_id: str) -> Dict[str, Any] | None:
    return next((t for t in WELLNESS_TIPS if t["id"] == tip_id), None)
