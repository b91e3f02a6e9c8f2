"""
sichr_api — FastAPI service for the SichrPlace performance-optimization layer.

Start with:
    sichr serve
    # or
    uvicorn sichr_api.app:app --reload --port 8000

Endpoints:
    GET  /health
    GET  /ready
    POST /performance/optimize-search
    POST /performance/cache-popular
    POST /performance/preload-images
    POST /performance/optimize-db
    GET  /performance/performance-report
    ANY  /performance/clear-cache?pattern=
"""

__version__ = "0.1.0"
