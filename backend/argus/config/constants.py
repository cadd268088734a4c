"""
Centralized constants for ARGUS detectors, scoring and reporting.

Import from here instead of redefining thresholds in detector modules.
"""
from ..models.analysis import RiskLevel

METHODOLOGY_VERSION = "argus-1.2"

# Currency units
LAKH = 100_000
CRORE = 10_000_000

# SingleBidder
SINGLE_BIDDER_BASE_SCORE = 60.0
SINGLE_BIDDER_SIZE_CAP = 20.0
SINGLE_BIDDER_SIZE_UNIT = 1_000        # size term counts thousands of currency units
SINGLE_BIDDER_SIZE_DIVISOR = 50.0
SINGLE_BIDDER_HIGH_VALUE = 1_000_000
SINGLE_BIDDER_HIGH_VALUE_BONUS = 15.0

# VendorRepetition
VENDOR_REPETITION_WINDOW_DAYS = 365
VENDOR_REPETITION_MIN_CONTRACTS = 3    # fires when count is strictly greater
VENDOR_REPETITION_BASE_SCORE = 40.0
VENDOR_REPETITION_PER_CONTRACT = 10.0
VENDOR_REPETITION_PER_CRORE = 5.0
VENDOR_REPETITION_SHORT_WINDOW_DAYS = 180
VENDOR_REPETITION_SHORT_WINDOW_VALUE = 10_000_000
VENDOR_REPETITION_FLOOR_SCORE = 70.0

# CompressedDeadline
DEADLINE_VALUE_BAND = 5_000_000
DEADLINE_MIN_DAYS_SMALL = 7
DEADLINE_MIN_DAYS_LARGE = 14
DEADLINE_BASE_SCORE = 50.0
DEADLINE_DEVIATION_SCALE = 50.0

# BudgetAnomaly
BUDGET_OVERRUN_RATIO = 1.20
BUDGET_Z_THRESHOLD = 2.0
BUDGET_BASE_SCORE = 65.0
BUDGET_Z_CAP = 35.0
BUDGET_Z_SCALE = 10.0

# SpecTailoring
SPEC_MIN_RESTRICTIVE = 3
SPEC_MIN_BRANDS = 2
SPEC_BASE_SCORE = 70.0
SPEC_INDICATOR_CAP = 30.0
SPEC_PER_INDICATOR = 5.0

# Scoring
MAX_SCORE = 100.0
INTERACTION_STEP = 0.05
DEADLINE_SINGLE_BIDDER_FACTOR = 1.15

# Risk level thresholds: LOW < 40 <= MEDIUM <= 70 < HIGH
RISK_MEDIUM_FLOOR = 40.0
RISK_HIGH_ABOVE = 70.0

DISCLAIMER = (
    "Risk scores are analytical indicators, not evidence of wrongdoing. "
    "Further investigation is required before drawing conclusions."
)

DEFAULT_DENY_LIST = (
    "proves corruption",
    "guilty of",
    "fraudulent",
    "criminal activity",
    "definitely corrupt",
    "bribe",
    "kickback",
    "embezzle",
    "colluded",
)


def clamp_score(value: float) -> float:
    """Clamp a raw score into [0, 100]."""
    return max(0.0, min(MAX_SCORE, float(value)))


def get_risk_level(score: float) -> RiskLevel:
    """Return the risk level for a combined score (0-100)."""
    if score > RISK_HIGH_ABOVE:
        return RiskLevel.HIGH
    if score >= RISK_MEDIUM_FLOOR:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW
