"""
Banking Ledger - Source Package

A small command-line ledger for personal accounts.

DESIGN PRINCIPLES:
1. Balances are exact decimals, never floats
2. Fail early, fail visibly
3. Validate everything before mutating anything
4. The file on disk only ever holds committed states
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Banking Ledger Team"
