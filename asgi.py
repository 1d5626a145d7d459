"""
asgi.py -- ASGI entry point for Self Diary.

Run with:  uvicorn asgi:app --reload
           uvicorn asgi:app --host 127.0.0.1 --port 8080
"""

from api.main import app

__all__ = ["app"]
