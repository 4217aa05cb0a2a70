"""
API Models for request/response validation and Swagger documentation
"""

from flask_restx import fields, reqparse
from werkzeug.datastructures import FileStorage

from filegate.api.v1 import api

# =============================================================================
# Request Models
# =============================================================================

upload_parser = reqparse.RequestParser()
upload_parser.add_argument(
    "file", location="files", type=FileStorage, required=False, help="File content"
)
upload_parser.add_argument(
    "filename", location="form", type=str, required=False,
    help="Name to store the file under (defaults to the uploaded file's name)",
)

delete_request = api.model(
    "DeleteRequest",
    {
        "files": fields.List(
            fields.String,
            required=True,
            description="Names of the files to delete",
            example=["a.txt", "b.txt"],
        )
    },
)

download_parser = reqparse.RequestParser()
download_parser.add_argument(
    "noDisposition", location="args", type=str, required=False,
    help="Omit the save-as filename from the signed link",
)

storage_parser = reqparse.RequestParser()
storage_parser.add_argument("target", location="args", type=str, required=True)
storage_parser.add_argument("filename", location="args", type=str, required=False)
storage_parser.add_argument("expire", location="args", type=int, required=True)
storage_parser.add_argument("secret", location="args", type=str, required=True)

# =============================================================================
# Response Models
# =============================================================================

file_record = api.model(
    "FileRecord",
    {
        "_id": fields.String(description="File name (ledger key)"),
        "name": fields.String(description="File name"),
        "size": fields.Integer(description="Size in bytes"),
        "lastModified": fields.String(
            description="Last modification time (ISO timestamp)", allow_null=True
        ),
        "etag": fields.String(description="Content hash", allow_null=True),
    },
)

delete_response = api.model(
    "DeleteResponse",
    {
        "deleted": fields.List(fields.String, description="Names removed from the ledger"),
        "orphaned": fields.List(
            fields.String, description="Storage paths left behind for the orphan sweep"
        ),
    },
)

error_response = api.model(
    "ErrorResponse",
    {
        "error": fields.String(description="Error category"),
        "title": fields.String(description="Short error title"),
        "message": fields.String(description="User-facing error message"),
        "action": fields.String(description="Suggested next step"),
        "field": fields.String(description="Offending request field", allow_null=True),
    },
)
