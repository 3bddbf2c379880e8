"""
Interfaces - how the front-end reaches the router.

- http: FastAPI JSON API
"""
