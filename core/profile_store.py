# core/profile_store.py
"""
User profile for personalised insights.

The profile only changes how tips are filtered and which
patterns count as expected. It never gates achievements.
"""

import logging
from typing import Any, Dict, List

from core import storage

logger = logging.getLogger(__name__)

# ==================================================
# CONSTANTS (SCHEMA)
# ==================================================
AGE_RANGES = ["under18", "18-30", "31-45", "46-60", "60+"]
BIOLOGICAL_SEXES = ["female", "male", "not-specified"]
HEALTH_CONDITIONS = [
    "ibs",
    "ibd",
    "celiac",
    "diabetes",
    "thyroid",
    "pregnant",
    "lactose-intolerant",
    "none",
]

CONDITION_LABELS = {
    "ibs": "IBS (Irritable Bowel Syndrome)",
    "ibd": "IBD (Crohn's or Ulcerative Colitis)",
    "celiac": "Celiac Disease",
    "diabetes": "Diabetes",
    "thyroid": "Thyroid",
    "pregnant": "Pregnant or Postpartum",
    "lactose-intolerant": "Lactose Intolerant",
    "none": "None of these",
}

# How conditions shift what counts as "normal"
CONDITION_EFFECTS: Dict[str, Dict[str, Any]] = {
    "ibs": {
        "expect_constipation": True,
        "expect_loose": True,
        "avoid_fiber_tips": True,
        "notes": [
            "IBS can cause alternating patterns - this is normal for your condition.",
            "Low-FODMAP diet may help manage IBS symptoms.",
        ],
    },
    "ibd": {
        "expect_loose": True,
        "avoid_fiber_tips": True,
        "notes": [
            "During flares, focus on easily digestible foods.",
            "Track symptoms to identify trigger foods.",
        ],
    },
    "celiac": {
        "expect_loose": True,
        "notes": ["Even small amounts of gluten can affect your gut."],
    },
    "diabetes": {
        "notes": ["Blood sugar fluctuations can affect gut motility."],
    },
    "thyroid": {
        "expect_constipation": True,
        "notes": ["Hypothyroidism often causes slower digestion."],
    },
    "pregnant": {
        "expect_constipation": True,
        "notes": ["Constipation is very common during pregnancy."],
    },
    "lactose-intolerant": {
        "expect_loose": True,
        "notes": ["Dairy may be causing digestive issues."],
    },
    "none": {},
}

AGE_EFFECTS: Dict[str, Dict[str, Any]] = {
    "under18": {"notes": "Growing bodies may have variable patterns."},
    "18-30": {},
    "31-45": {},
    "46-60": {"slower_transit": True, "notes": "Digestion may slow slightly."},
    "60+": {"slower_transit": True, "notes": "Slower transit is common and normal."},
}


def _safe_default() -> Dict[str, Any]:
    return {"conditions": []}


# ==================================================
# VALIDATION
# ==================================================
def normalize_conditions(conditions: List[str]) -> List[str]:
    """
    Drop unknown values and keep "none" exclusive:
    any real condition wins over "none".
    """
    cleaned = [c for c in dict.fromkeys(conditions or []) if c in HEALTH_CONDITIONS]
    real = [c for c in cleaned if c != "none"]
    if real:
        return real
    return ["none"] if "none" in cleaned else []


def _validate(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        return _safe_default()

    profile: Dict[str, Any] = {
        "conditions": normalize_conditions(data.get("conditions") or []),
    }

    if data.get("ageRange") in AGE_RANGES:
        profile["ageRange"] = data["ageRange"]
    if data.get("biologicalSex") in BIOLOGICAL_SEXES:
        profile["biologicalSex"] = data["biologicalSex"]
    if isinstance(data.get("profileCompletedAt"), (int, float)):
        profile["profileCompletedAt"] = int(data["profileCompletedAt"])
    if data.get("profileSkipped"):
        profile["profileSkipped"] = True

    return profile


# ==================================================
# LOAD / SAVE
# ==================================================
def load_profile() -> Dict[str, Any]:
    return _validate(storage.load_json(storage.STORAGE_KEYS["USER_PROFILE"]))


def save_profile(profile: Dict[str, Any]) -> Dict[str, Any]:
    if profile.get("ageRange") and profile["ageRange"] not in AGE_RANGES:
        raise ValueError(f"Unknown age range: {profile['ageRange']}")
    if profile.get("biologicalSex") and profile["biologicalSex"] not in BIOLOGICAL_SEXES:
        raise ValueError(f"Unknown biological sex: {profile['biologicalSex']}")

    unknown = set(profile.get("conditions") or []) - set(HEALTH_CONDITIONS)
    if unknown:
        raise ValueError(f"Unknown conditions: {sorted(unknown)}")

    profile = _validate(profile)
    storage.save_json(storage.STORAGE_KEYS["USER_PROFILE"], profile)
    return profile


def condition_notes(profile: Dict[str, Any]) -> List[str]:
    notes = []
    for c in (profile or {}).get("conditions", []):
        notes.extend(CONDITION_EFFECTS.get(c, {}).get("notes", []))
    return notes
