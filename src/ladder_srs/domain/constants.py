"""Centralized constants for the scheduling engine.

Every layer imports tuning numbers from here so the algorithm and its
callers agree on a single source of truth.
"""

# ---------- Ease factor ----------
MIN_EASE_FACTOR = 1.3
DEFAULT_EASE_FACTOR = 2.5
LAPSE_EASE_PENALTY = 0.2

# ---------- Quality scale ----------
MAX_QUALITY = 5
CORRECT_THRESHOLD = 3  # quality >= 3 counts as correct
QUALITY_CORRECT = 5  # what the review flow submits for a right answer
QUALITY_INCORRECT = 1  # ... and for a wrong one

# ---------- Demotion ----------
APPRENTICE_LAPSE_DROP = 1
GURU_LAPSE_DROP = 2

# ---------- Due queue ----------
DEFAULT_DUE_QUEUE_LIMIT = 100

# ---------- Time ----------
HOURS_PER_DAY = 24
