"""Classroom attendance tracker package.

Organized by feature modules (ledger, roster, locations) behind a thin Flask
controller layer, with services depending on table-backed repositories.
"""
