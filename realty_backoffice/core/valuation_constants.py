"""Valuation constants - single source of truth for the comparative method.

Bands and thresholds follow NBR 14653-2 (direct comparative method).
"""

# Homogenization: per-factor adjustment when a sample differs from the target
DEFAULT_ADJUSTMENT_FACTOR = 0.10

# First pass: samples outside [60%, 140%] of the median are abnormal
OUTLIER_LOWER_RATIO = 0.6
OUTLIER_UPPER_RATIO = 1.4

# Second pass: samples outside [80%, 120%] of the recomputed median are excluded
NORMAL_LOWER_RATIO = 0.8
NORMAL_UPPER_RATIO = 1.2

# Minimum samples for each filtering pass and for a study
MIN_FILTERED_SAMPLES = 3
MIN_STUDY_SAMPLES = 3

# Reliability
RELIABLE_CV_PCT = 30.0

# Precision grades: (upper CV bound inclusive, grade)
PRECISION_GRADES = (
    (10.0, "excellent"),
    (20.0, "good"),
    (30.0, "acceptable"),
)
LOW_PRECISION_GRADE = "low"

PRECISION_DESCRIPTIONS = {
    "excellent": "Excelente precisão (CV ≤ 10%)",
    "good": "Boa precisão (10% < CV ≤ 20%)",
    "acceptable": "Precisão aceitável (20% < CV ≤ 30%)",
    "low": "Baixa precisão (CV > 30%)",
}

# Market perception adjustment bounds (%)
PERCEPTION_MIN_PCT = -50.0
PERCEPTION_MAX_PCT = 50.0

# Area cap (m²)
MAX_AREA_SQM = 100_000.0
