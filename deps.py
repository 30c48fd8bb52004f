"""FastAPI dependencies shared by the route modules."""
from fastapi import Request

from gateway import AIGateway


def get_gateway(request: Request) -> AIGateway:
    """Return the gateway the app was built with."""
    return request.app.state.gateway
