"""
Tests for company-type classification.
"""

import pytest

from riskscope.core.data.classification import classify_company_type
from riskscope.core.data.models import CompanyType


class TestClassifyCompanyType:
    """Tests for the keyword classifier."""

    @pytest.mark.parametrize(
        "industry,sector",
        [
            ("Auto Manufacturers", "Consumer Cyclical"),
            ("Specialty Chemicals", "Basic Materials"),
            ("Steel", None),
            ("Oil & Gas Integrated", "Energy"),
            ("Aerospace & Defense", "Industrials"),
            ("Beverages - Non-Alcoholic", "Consumer Defensive"),
            ("Engineering & Construction", None),
        ],
    )
    def test_manufacturing_industries(self, industry, sector):
        assert classify_company_type(industry, sector) is CompanyType.MANUFACTURING

    @pytest.mark.parametrize(
        "industry,sector",
        [
            ("Software - Infrastructure", "Technology"),
            ("Banks - Diversified", "Financial Services"),
            ("Internet Retail", "Consumer Cyclical"),
            ("Healthcare Plans", "Healthcare"),
        ],
    )
    def test_non_manufacturing_industries(self, industry, sector):
        assert classify_company_type(industry, sector) is CompanyType.NON_MANUFACTURING

    def test_sector_alone_can_match(self):
        """Test a keyword in the sector is enough."""
        assert classify_company_type("Unknown", "Utilities") is CompanyType.MANUFACTURING

    def test_case_insensitive(self):
        assert classify_company_type("AUTOMOTIVE PARTS") is CompanyType.MANUFACTURING

    def test_missing_text_defaults_to_non_manufacturing(self):
        assert classify_company_type(None, None) is CompanyType.NON_MANUFACTURING
        assert classify_company_type("") is CompanyType.NON_MANUFACTURING

    def test_deterministic(self):
        """Test the same text always yields the same classification."""
        results = {classify_company_type("Farm & Heavy Construction Machinery") for _ in range(10)}
        assert results == {CompanyType.MANUFACTURING}
