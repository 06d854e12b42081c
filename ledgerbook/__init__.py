"""
Ledgerbook - Source Package

A local bookkeeping core for small shops: user-defined inventory
collections with typed fields, plus credit/debit ledgers kept per
organization. Everything lives in one JSON document on disk.

DESIGN PRINCIPLES:
1. The schema drives validation and display of every record
2. Failed operations leave state untouched
3. Deletes are idempotent
4. Every mutation is audited
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Ledgerbook Team"
