"""
Thin wrappers around the Google Slides v1 and Drive v3 API clients.

Handlers only talk to these classes, which keeps request building testable
with mocks. Every remote call goes through the transient-error retry policy.
"""

import io
from typing import Any, Dict, List, Optional

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.http import MediaIoBaseUpload

from gslides_mcp.core.ids import IdGenerator
from gslides_mcp.utils.retry import retry_on_transient_error

COMMENT_FIELDS = (
    "comments(id,kind,content,htmlContent,author,createdTime,modifiedTime,"
    "resolved,deleted,anchor,replies,quotedFileContent),nextPageToken"
)
COMMENTS_PAGE_SIZE = 100


class _RetryingService:
    """Executes googleapiclient requests under a shared retry policy."""

    def __init__(self, resource, max_attempts: int = 3, max_wait: float = 10.0):
        self.resource = resource
        self._execute = retry_on_transient_error(
            max_attempts=max_attempts,
            max_wait=max_wait
        )(self._execute_once)

    @staticmethod
    def _execute_once(request):
        return request.execute()


class SlidesService(_RetryingService):
    """Google Slides API operations used by the tools."""

    def get_presentation(self, presentation_id: str) -> Dict[str, Any]:
        return self._execute(
            self.resource.presentations().get(presentationId=presentation_id)
        )

    def create_presentation(self, title: str) -> Dict[str, Any]:
        return self._execute(
            self.resource.presentations().create(body={"title": title})
        )

    def batch_update(self, presentation_id: str, requests: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Apply a list of requests atomically.

        Args:
            presentation_id: Target presentation
            requests: Slides API request objects

        Returns:
            BatchUpdatePresentationResponse as a dict
        """
        return self._execute(
            self.resource.presentations().batchUpdate(
                presentationId=presentation_id,
                body={"requests": requests}
            )
        )

    def get_thumbnail(self, presentation_id: str, page_id: str) -> Dict[str, Any]:
        return self._execute(
            self.resource.presentations().pages().getThumbnail(
                presentationId=presentation_id,
                pageObjectId=page_id
            )
        )


class DriveService(_RetryingService):
    """Google Drive API operations: uploads, sharing, moves and comments."""

    def upload_file(
        self,
        name: str,
        mime_type: str,
        content: bytes,
        folder_id: Optional[str] = None
    ) -> str:
        """
        Upload bytes as a new Drive file.

        Args:
            name: File name
            mime_type: MIME type of the content
            content: File bytes
            folder_id: Optional parent folder

        Returns:
            New file ID
        """
        metadata: Dict[str, Any] = {"name": name, "mimeType": mime_type}
        if folder_id:
            metadata["parents"] = [folder_id]
        media = MediaIoBaseUpload(io.BytesIO(content), mimetype=mime_type, resumable=False)
        created = self._execute(
            self.resource.files().create(body=metadata, media_body=media, fields="id")
        )
        return created["id"]

    def make_file_public(self, file_id: str) -> None:
        """Grant "anyone with the link" read access."""
        self._execute(
            self.resource.permissions().create(
                fileId=file_id,
                body={"type": "anyone", "role": "reader"}
            )
        )

    def move_file(self, file_id: str, folder_id: str) -> None:
        current = self._execute(
            self.resource.files().get(fileId=file_id, fields="parents", supportsAllDrives=True)
        )
        previous_parents = ",".join(current.get("parents", []))
        self._execute(
            self.resource.files().update(
                fileId=file_id,
                addParents=folder_id,
                removeParents=previous_parents,
                supportsAllDrives=True,
                fields="id, parents"
            )
        )

    def copy_file(self, file_id: str, name: str, folder_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Copy a Drive file under a new name.

        Returns:
            Drive file resource with id and name
        """
        body: Dict[str, Any] = {"name": name}
        if folder_id:
            body["parents"] = [folder_id]
        return self._execute(
            self.resource.files().copy(
                fileId=file_id,
                body=body,
                supportsAllDrives=True,
                fields="id,name"
            )
        )

    def list_comments(self, file_id: str, page_token: Optional[str] = None) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {
            "fileId": file_id,
            "fields": COMMENT_FIELDS,
            "includeDeleted": False,
            "pageSize": COMMENTS_PAGE_SIZE,
        }
        if page_token:
            kwargs["pageToken"] = page_token
        return self._execute(self.resource.comments().list(**kwargs))

    def create_comment(self, file_id: str, content: str, anchor: Optional[str] = None) -> Dict[str, Any]:
        body: Dict[str, Any] = {"content": content}
        if anchor:
            body["anchor"] = anchor
        return self._execute(
            self.resource.comments().create(
                fileId=file_id,
                body=body,
                fields="id,content,anchor,createdTime,author"
            )
        )

    def create_reply(
        self,
        file_id: str,
        comment_id: str,
        content: Optional[str] = None,
        action: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Reply to a comment. A reply with action "resolve" or "reopen"
        changes the comment's resolved state.
        """
        body: Dict[str, Any] = {}
        if content:
            body["content"] = content
        if action:
            body["action"] = action
        return self._execute(
            self.resource.replies().create(
                fileId=file_id,
                commentId=comment_id,
                body=body,
                fields="id,content,action,createdTime"
            )
        )

    def delete_comment(self, file_id: str, comment_id: str) -> None:
        self._execute(
            self.resource.comments().delete(fileId=file_id, commentId=comment_id)
        )


class ServiceBundle:
    """Remote services plus the ID generator handed to every tool handler."""

    def __init__(
        self,
        slides: SlidesService,
        drive: DriveService,
        ids: Optional[IdGenerator] = None,
        upload_folder_id: Optional[str] = None
    ):
        self.slides = slides
        self.drive = drive
        self.ids = ids or IdGenerator()
        self.upload_folder_id = upload_folder_id


def build_services(
    credentials: Credentials,
    max_attempts: int = 3,
    max_wait: float = 10.0,
    upload_folder_id: Optional[str] = None
) -> ServiceBundle:
    """
    Build real Slides and Drive clients.

    Args:
        credentials: Authorized user credentials
        max_attempts: Attempts per remote call on transient failures
        max_wait: Maximum backoff between attempts in seconds
        upload_folder_id: Drive folder for uploaded images

    Returns:
        ServiceBundle wired to the live APIs
    """
    slides = build("slides", "v1", credentials=credentials, cache_discovery=False)
    drive = build("drive", "v3", credentials=credentials, cache_discovery=False)
    return ServiceBundle(
        SlidesService(slides, max_attempts=max_attempts, max_wait=max_wait),
        DriveService(drive, max_attempts=max_attempts, max_wait=max_wait),
        upload_folder_id=upload_folder_id
    )
