"""
API Namespaces - Organized endpoint groups
"""

import os
import tempfile

from flask import current_app, redirect, request, send_file
from flask_restx import Namespace, Resource

from filegate.api.auth import current_principal
from filegate.api.v1.models import (
    delete_request,
    delete_response,
    download_parser,
    error_response,
    file_record,
    storage_parser,
    upload_parser,
)
from filegate.application import DownloadService, FileService
from filegate.domain.errors import (
    DomainError,
    ErrorCategory,
    ForbiddenError,
    ValidationError,
    create_error_response,
    domain_error_response,
)
from filegate.domain.file_storage import UploadedContent


def _system_error(message: str):
    current_app.logger.exception(message)
    return create_error_response(
        ErrorCategory.SYSTEM_ERROR, message, status_code=500
    )


# =============================================================================
# Files Namespace - Per-principal file management
# =============================================================================

files_ns = Namespace("files", description="File upload, listing and deletion")


@files_ns.route("")
class FileList(Resource):
    """The requesting principal's files"""

    @files_ns.doc("list_files")
    @files_ns.response(200, "Success", [file_record])
    @files_ns.response(403, "Forbidden", error_response)
    def get(self):
        """
        List files

        Returns the requester's files sorted by name.
        """
        try:
            file_service = current_app.container.resolve(FileService)
            records = file_service.list_files(current_principal())
            return [record.to_dict() for record in records], 200

        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            return _system_error(f"Unexpected error listing files: {e}")

    @files_ns.doc("upload_file")
    @files_ns.expect(upload_parser)
    @files_ns.response(201, "Created", file_record)
    @files_ns.response(400, "Bad Request", error_response)
    @files_ns.response(403, "Forbidden", error_response)
    @files_ns.response(409, "File Exists", error_response)
    @files_ns.response(500, "Upload Failed", error_response)
    def post(self):
        """
        Upload a file

        Stores the multipart ``file`` under ``filename`` (or the uploaded
        file's own name, or a random name) subject to the file count and
        total size quotas.
        """
        upload = request.files.get("file")
        filename = request.form.get("filename") or None
        tmp_path = None

        try:
            content = None
            if upload is not None:
                with tempfile.NamedTemporaryFile(prefix="filegate-", delete=False) as tmp:
                    tmp_path = tmp.name
                    upload.save(tmp)
                content = UploadedContent.from_path(tmp_path, upload.filename or None)

            file_service = current_app.container.resolve(FileService)
            record = file_service.upload(current_principal(), content, filename)
            return record.to_dict(), 201

        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            return _system_error(f"Unexpected error uploading file: {e}")
        finally:
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    current_app.logger.warning(f"Could not remove temporary upload {tmp_path}")

    @files_ns.doc("delete_files")
    @files_ns.expect(delete_request)
    @files_ns.response(200, "Deleted", delete_response)
    @files_ns.response(400, "Bad Request", error_response)
    def delete(self):
        """
        Delete files

        Removes the named files from storage and from the ledger. Objects
        the storage engine failed to remove are reported as ``orphaned``.
        """
        data = request.get_json(silent=True) or {}
        filenames = data.get("files")

        try:
            if not isinstance(filenames, list) or not all(
                isinstance(name, str) for name in filenames
            ):
                raise ValidationError("files", "Expected a list of file names")

            file_service = current_app.container.resolve(FileService)
            result = file_service.delete(current_principal(), filenames)
            return result.to_dict(), 200

        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            return _system_error(f"Unexpected error deleting files: {e}")


@files_ns.route("/<int:uid>/<string:filename>")
@files_ns.param("uid", "Owner principal id")
@files_ns.param("filename", "File name in the owner's namespace")
class FileDownload(Resource):
    """Signed download redirect"""

    @files_ns.doc("download_file")
    @files_ns.expect(download_parser)
    @files_ns.response(302, "Redirect to a signed storage link")
    @files_ns.response(403, "Forbidden", error_response)
    @files_ns.response(404, "Owner Not Found", error_response)
    def get(self, uid, filename):
        """
        Download a file

        Redirects to a temporary signed link for the file. Pass
        ``noDisposition`` to let the client render the content inline.
        """
        no_disposition = "noDisposition" in request.args

        try:
            download_service = current_app.container.resolve(DownloadService)
            url = download_service.issue_link(
                current_principal(), uid, filename, no_disposition
            )

        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            return _system_error(f"Unexpected error issuing link for {uid}/{filename}: {e}")

        response = redirect(url, code=302)
        response.headers["Cache-Control"] = "public"
        return response


# =============================================================================
# Storage Namespace - Signed link redemption
# =============================================================================

storage_ns = Namespace("storage", description="Signed link redemption")


@storage_ns.route("")
class SignedStorage(Resource):
    """Serve an object through a signed link"""

    @storage_ns.doc("fetch_signed_object")
    @storage_ns.expect(storage_parser)
    @storage_ns.response(200, "Object content")
    @storage_ns.response(400, "Bad Request", error_response)
    @storage_ns.response(403, "Invalid Link", error_response)
    @storage_ns.response(404, "Object Not Found", error_response)
    def get(self):
        """
        Fetch an object

        Validates the link's expiry and secret, then streams the object.
        """
        args = request.args

        try:
            for name in ("target", "expire", "secret"):
                if not args.get(name):
                    raise ValidationError(name, f"Missing '{name}' parameter")
            try:
                expire = int(args["expire"])
            except ValueError:
                raise ForbiddenError("Malformed expiry", ErrorCategory.INVALID_LINK)

            download_service = current_app.container.resolve(DownloadService)
            signed_object = download_service.open_link(
                args["target"], expire, args["secret"], args.get("filename") or None
            )

        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            return _system_error(f"Unexpected error serving signed object: {e}")

        response = send_file(signed_object.stream, mimetype=signed_object.content_type)
        if signed_object.disposition:
            response.headers["Content-Disposition"] = signed_object.disposition
        return response
