"""
Query API.

aiohttp application serving the dashboard.
"""
