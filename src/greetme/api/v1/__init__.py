"""
API v1 package.

Contains the account routes of the GreetMe API, mounted under /api.
"""

from greetme.api.v1.routes import router

__all__ = ["router"]
