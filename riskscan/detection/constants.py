"""
Fixed scoring constants for the forensic heuristics and risk classification.

These are part of the scan contract and are not exposed
through `riskscan.config.settings`.
"""

import re

# --- Heuristic rule points ---
EDITING_TOOL_PATTERN = re.compile(r"photoshop|canva|picsart|snapseed|editor|paint|express", re.IGNORECASE)
EDITING_TOOL_POINTS = 40
ALTERED_TIMESTAMP_POINTS = 30
EXIF_CONTRADICTION_POINTS = 15
GEOMETRY_MISMATCH_POINTS = 20

# Absolute tolerance when matching height/width against a template's ratios
ASPECT_RATIO_TOLERANCE = 0.1

# --- Score bounds ---
MIN_SCORE = 0
MAX_SCORE = 100

# --- Risk thresholds: (High if score >, Medium if score >) ---
# Text, link and AI-assisted forensic scans share one table; the heuristic-only
# forensic fallback uses lower cut-offs.
STANDARD_THRESHOLDS = (70, 35)
HEURISTIC_FALLBACK_THRESHOLDS = (65, 30)

# --- Heuristic-only layout verdict: (Failed if score >, Suspicious if score >) ---
LAYOUT_FALLBACK_THRESHOLDS = (60, 25)
