"""Infrastructure layer — filesystem access, model discovery, shared-type loading.

This layer depends on stdlib, pydantic, the domain layer and config models.
It must never import from services, commands, output, or mcp.
"""
