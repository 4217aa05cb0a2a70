"""
API v1 - Filegate REST API

This module contains the versioned API endpoints with OpenAPI/Swagger documentation.
"""

import os

from flask import Blueprint
from flask_restx import Api

from filegate.api.auth import load_principal

# Get API version from environment
API_VERSION = os.getenv("API_VERSION", "v1")

# Create blueprint for API v1
api_v1_bp = Blueprint("api_v1", __name__, url_prefix=f"/api/{API_VERSION}")
api_v1_bp.before_request(load_principal)

# Initialize Flask-RESTX API with Swagger documentation
api = Api(
    api_v1_bp,
    version="1.0",
    title="Filegate API",
    description="Per-user file storage with quotas and signed temporary download links",
    doc="/docs",  # Swagger UI will be available at /api/v1/docs
)

# Import namespaces after api is created to avoid circular imports
from .namespaces import files_ns, storage_ns  # noqa: E402

# Register namespaces
api.add_namespace(files_ns, path="/files")
api.add_namespace(storage_ns, path="/storage")
