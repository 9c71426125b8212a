"""HTTP API for the proxy server."""
