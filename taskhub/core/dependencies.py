"""
Core dependencies shared by the route handlers
"""

from fastapi import Request

from taskhub.modules.sessioning.service import SessionDoc


def get_session(request: Request) -> SessionDoc:
    """The signed-cookie session of the current request (set up by SessionMiddleware)"""
    return request.session
