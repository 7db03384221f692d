"""
Riskscope - CLI-first bankruptcy-risk workstation.

Resolves free-text company identifiers, pulls financial statements and market
data from several rate-limited providers, and scores them with a deterministic
ratio engine and the Altman Z-Score.
"""

__version__ = "0.1.0"
