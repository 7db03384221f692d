"""
Company-type classification for the Altman formula variant.

A pure function of industry/sector text: the same text always yields the
same classification. Absence of a manufacturing keyword means
non-manufacturing.
"""

from typing import Optional

from riskscope.core.data.models import CompanyType

MANUFACTURING_KEYWORDS = (
    "manufacturing",
    "manufacturers",
    "automotive",
    "aerospace",
    "industrial",
    "machinery",
    "construction",
    "materials",
    "chemicals",
    "steel",
    "mining",
    "oil",
    "energy",
    "utilities",
    "transportation",
    "textiles",
    "food",
    "beverage",
)


def classify_company_type(
    industry: Optional[str],
    sector: Optional[str] = None,
) -> CompanyType:
    """
    Classify a company as manufacturing or non-manufacturing.

    Args:
        industry: Provider industry text (e.g., "Auto Manufacturers")
        sector: Provider sector text (e.g., "Consumer Cyclical")

    Returns:
        CompanyType.MANUFACTURING if any keyword appears in either text,
        otherwise CompanyType.NON_MANUFACTURING
    """
    text = f"{industry or ''} {sector or ''}".lower()
    if any(keyword in text for keyword in MANUFACTURING_KEYWORDS):
        return CompanyType.MANUFACTURING
    return CompanyType.NON_MANUFACTURING
