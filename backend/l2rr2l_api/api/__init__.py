"""API Layer — FastAPI routes, middleware and error handlers.

Invariants:
    - Routes and handler groups registered explicitly in main.create_app()
    - All gateway-produced errors use the GatewayError envelope
"""
