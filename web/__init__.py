"""
MemeMarketer web application.

aiohttp server for the token page API, the rendered coin pages and
uploaded logos.
"""
