"""
Shared Movie Explorer library code.

This package is intended to hold code that is reused across:
- the FastAPI proxy app in `api/`
- the terminal front end in `scripts/`

App entrypoints (FastAPI routers, CLI scripts) should live outside this package and
import from `movie_explorer` rather than the other way around.
"""
