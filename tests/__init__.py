"""
Test suite for the fulfillment ledger.

Test Organization:
- conftest.py - shared fixtures (users, products with unit pools, core services)
- integration/ - database-backed tests of the ledger, orders, returns and API
"""
