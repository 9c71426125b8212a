"""Pitchview - football statistics viewer with a same-origin caching proxy.

Two halves:
- pitchview.proxy / pitchview.api: server that attaches the API credential
  and forwards GET requests to football-data.org with a short-lived cache
- pitchview.client: data layer that talks to the proxy with retry, local
  caches and player search
"""

__version__ = "0.1.0"
