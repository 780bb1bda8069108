"""
HTTP API.

aiohttp application exposing user and admin operations:
- app: Application factory and entrypoint
- dependencies: Identity headers, sessions and body parsing
- responses: JSON encoding and error mapping
- routes: Route tables per area
"""
