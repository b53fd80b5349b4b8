"""
Storage operation registrations.

Upload, list and delete app files (APK, IPA, ZIP) kept in TestingBot storage.
"""

import logging
from typing import Any, Dict

from ...utils.urls import is_valid_url
from ..operation_registry import OperationCategory, OperationDescriptor, OperationResult
from ..schema import ArgumentSchema, ParamKind, ParamSpec
from .common import page_heading, pagination_params, response_items

logger = logging.getLogger(__name__)

BYTES_PER_MB = 1024 * 1024


def _app_url(result: Any) -> Any:
    return result.get("app_url") if isinstance(result, dict) else None


# ============================================================================
# Operation Handlers
# ============================================================================

async def upload_file_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for uploadFile operation."""
    path = params["localFilePath"]
    logger.info(f"Uploading file {path}")

    result = await client.upload_file(path)

    return OperationResult(
        message=(
            "File uploaded successfully!\n\n"
            f"**App URL**: {_app_url(result)}\n\n"
            "Use this URL in your test capabilities."
        ),
        data=result,
    )


async def upload_remote_file_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for uploadRemoteFile operation."""
    remote_url = params["remoteUrl"]
    if not is_valid_url(remote_url):
        raise ValueError("Invalid URL provided")

    logger.info(f"Uploading remote file {remote_url}")
    result = await client.upload_remote_file(remote_url)

    return OperationResult(
        message=(
            "Remote file uploaded successfully!\n\n"
            f"**App URL**: {_app_url(result)}\n\n"
            "Use this URL in your test capabilities."
        ),
        data=result,
    )


async def get_storage_files_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for getStorageFiles operation."""
    offset, limit = params["offset"], params["limit"]
    logger.info(f"Fetching storage files (offset={offset}, limit={limit})")

    response = await client.get_storage_files(offset, limit)
    files = response_items(response)

    lines = [page_heading("Storage Files", limit, offset)]
    if not files:
        lines.append("No files found in storage.")

    for item in files:
        size = item.get("size") or 0
        lines.append(f"### {item.get('name')}")
        lines.append(f"- **App URL**: {item.get('app_url')}")
        lines.append(f"- **Size**: {size / BYTES_PER_MB:.2f} MB")
        lines.append(f"- **Uploaded**: {item.get('uploaded_at')}")
        lines.append("")

    return OperationResult(message="\n".join(lines), data=response)


async def delete_storage_file_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for deleteStorageFile operation."""
    app_url = params["appUrl"]
    logger.info(f"Deleting storage file {app_url}")

    response = await client.delete_storage_file(app_url)
    return OperationResult(message="File deleted successfully from storage.", data=response)


# ============================================================================
# Operation Descriptors
# ============================================================================

UPLOAD_FILE = OperationDescriptor(
    name="uploadFile",
    category=OperationCategory.STORAGE,
    description=(
        "Upload a local file (APK, IPA, or ZIP) to TestingBot storage for mobile app "
        "testing. Returns an app_url for use in tests."
    ),
    input_schema=ArgumentSchema(
        ParamSpec("localFilePath", ParamKind.STRING, required=True, non_empty=True,
                  description="Local path to the file to upload"),
        title="UploadFileArguments",
    ),
    handler=upload_file_handler,
)

UPLOAD_REMOTE_FILE = OperationDescriptor(
    name="uploadRemoteFile",
    category=OperationCategory.STORAGE,
    description=(
        "Upload a file from a remote URL to TestingBot storage. The file will be "
        "downloaded from the URL and stored."
    ),
    input_schema=ArgumentSchema(
        ParamSpec("remoteUrl", ParamKind.URL, required=True,
                  description="Remote URL of the file to upload"),
        title="UploadRemoteFileArguments",
    ),
    handler=upload_remote_file_handler,
)

GET_STORAGE_FILES = OperationDescriptor(
    name="getStorageFiles",
    category=OperationCategory.STORAGE,
    description="List all files in TestingBot storage with pagination.",
    input_schema=ArgumentSchema(*pagination_params("files"), title="GetStorageFilesArguments"),
    handler=get_storage_files_handler,
)

DELETE_STORAGE_FILE = OperationDescriptor(
    name="deleteStorageFile",
    category=OperationCategory.STORAGE,
    description="Delete a file from TestingBot storage using its app_url.",
    input_schema=ArgumentSchema(
        ParamSpec("appUrl", ParamKind.STRING, required=True, non_empty=True,
                  description="The app_url of the file to delete"),
        title="DeleteStorageFileArguments",
    ),
    handler=delete_storage_file_handler,
)

STORAGE_OPERATIONS = [
    UPLOAD_FILE,
    UPLOAD_REMOTE_FILE,
    GET_STORAGE_FILES,
    DELETE_STORAGE_FILE,
]
