"""
HTTP API for CBB Stats.

Usage:
    uvicorn cbb_stats.api.main:app
"""
