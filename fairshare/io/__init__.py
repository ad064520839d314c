"""Loading and saving of election setups and allocation results.

Currently supports a single JSON-based format in :mod:`fairshare.io.election`.
"""
