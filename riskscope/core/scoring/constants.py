"""
Central financial threshold constants.

All scoring thresholds and zone boundaries are defined here as the single
source of truth. Import from this module instead of hardcoding values.
"""

# --- Altman Z-Score Zone Boundaries ---
# Manufacturing model (original 1968 formula)
ZSCORE_MFG_SAFE = 2.99      # > 2.99: Safe zone
ZSCORE_MFG_GREY_LOW = 1.8   # >= 1.8: Grey zone (below: Distress)

# Non-manufacturing model (Z'' revision)
ZSCORE_NON_MFG_SAFE = 2.6
ZSCORE_NON_MFG_GREY_LOW = 1.1

# --- Altman Formula Coefficients ---
ALTMAN_MFG_COEFFICIENTS = {
    "a": 1.2,   # Working Capital / Total Assets
    "b": 1.4,   # Retained Earnings / Total Assets
    "c": 3.3,   # EBIT / Total Assets
    "d": 0.6,   # Market Value of Equity / Total Liabilities
    "e": 1.0,   # Sales / Total Assets
}

ALTMAN_NON_MFG_COEFFICIENTS = {
    "a": 6.56,
    "b": 3.26,
    "c": 6.72,
    "d": 1.05,
}

# Cap for D when total_liabilities is zero
ZERO_LIABILITIES_EQUITY_CAP = 10.0

# Ratio effectively unbounded (e.g. positive EBIT with no interest expense).
# Finite so every ratio stays serializable and comparable.
UNBOUNDED_RATIO = 999.0

# --- Risk zones ---
ZONE_SAFE = "Safe"
ZONE_GREY = "Grey"
ZONE_DISTRESS = "Distress"
ZONE_UNKNOWN = "Unknown"
RISK_ZONES = (ZONE_SAFE, ZONE_GREY, ZONE_DISTRESS, ZONE_UNKNOWN)

# --- Data Quality ---
DATA_QUALITY_CHECKS = 10
DATA_QUALITY_HIGH_MIN = 80      # >= 80: High
DATA_QUALITY_MEDIUM_MIN = 60    # >= 60: Medium (below: Low, unreliable)
BALANCE_SHEET_TOLERANCE = 0.01  # relative, against total assets

# --- Portfolio Risk ---
PORTFOLIO_HIGH_DISTRESS_PCT = 25.0    # distress share > 25%: High
PORTFOLIO_MEDIUM_DISTRESS_PCT = 10.0  # distress share > 10%: Medium
PORTFOLIO_MEDIUM_GREY_PCT = 50.0      # or grey share > 50%: Medium

# Recommendation triggers
RECOMMEND_DISTRESS_PCT = 15.0
RECOMMEND_SAFE_PCT = 80.0
RECOMMEND_GREY_PCT = 30.0

# --- Ratio insight thresholds ---
INSIGHT_CURRENT_RATIO_LOW = 1.0
INSIGHT_CURRENT_RATIO_HIGH = 3.0
INSIGHT_DEBT_TO_EQUITY_HIGH = 2.0
INSIGHT_INTEREST_COVERAGE_LOW = 2.5
INSIGHT_ROE_STRONG = 15.0
