"""
Split Ledger - Source Package

Bookkeeping core for a two-person shared business: timesheets, invoices,
client payments, shared expenses and the revenue-distribution settlement
between the two partners.

DESIGN PRINCIPLES:
1. Calculations are pure functions over already-fetched records
2. Money is Decimal end to end, rounded only for presentation
3. The two-party constraint lives in one closed enumeration
4. Every recorded change is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Split Ledger Team"
