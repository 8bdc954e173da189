"""
Comment tools backed by the Drive v3 comments API.
"""

import json
from typing import Any, Dict, List, Optional

from pydantic import Field

from gslides_mcp.services.google_services import ServiceBundle
from gslides_mcp.tools.base import PresentationInput, ToolDefinition, remote_errors
from gslides_mcp.utils.exceptions import InvalidArgumentError
from gslides_mcp.utils.logging_config import get_logger
from gslides_mcp.utils.validators import validate_choice, validate_required_text

logger = get_logger(__name__)

COMMENT_ACTIONS = ["reply", "resolve", "unresolve", "delete"]


class AddCommentInput(PresentationInput):
    content: str = Field(description="Comment text")
    anchor_object_id: Optional[str] = Field(default=None, description="Attach the comment to this object")
    anchor_page_index: Optional[int] = Field(default=None, description="Attach the comment to this slide (0-based)")


class ListCommentsInput(PresentationInput):
    include_resolved: bool = Field(default=False, description="Include resolved comments")


class ManageCommentInput(PresentationInput):
    comment_id: str
    action: str = Field(description="reply, resolve, unresolve or delete")
    content: Optional[str] = Field(default=None, description="Reply text (required for reply)")


def build_anchor(object_id: Optional[str] = None, page_index: Optional[int] = None) -> Optional[str]:
    """
    Build the Drive anchor string for a comment.
    An object anchor wins over a page anchor; page numbers are 1-based.
    """
    if object_id:
        anchor = {"r": "content", "a": [{"n": "objectId", "v": object_id}]}
    elif page_index is not None:
        anchor = {"r": "content", "a": [{"n": "pageNumber", "v": str(page_index + 1)}]}
    else:
        return None
    return json.dumps(anchor, separators=(",", ":"))


def add_comment(services: ServiceBundle, params: AddCommentInput) -> Dict[str, Any]:
    content = validate_required_text(params.content, "content")
    if params.anchor_page_index is not None and params.anchor_page_index < 0:
        raise InvalidArgumentError(
            "anchor_page_index must be non-negative",
            field="anchor_page_index",
            value=params.anchor_page_index
        )

    logger.info(
        f"Adding comment to {params.presentation_id} "
        f"(anchor object: {bool(params.anchor_object_id)}, anchor page: {params.anchor_page_index is not None})"
    )

    anchor = build_anchor(params.anchor_object_id, params.anchor_page_index)
    with remote_errors("presentation", "add comment"):
        created = services.drive.create_comment(params.presentation_id, content, anchor)

    result = {
        "comment_id": created.get("id"),
        "presentation_id": params.presentation_id,
        "content": created.get("content", content),
    }
    if created.get("anchor"):
        result["anchor_info"] = created["anchor"]
    if created.get("createdTime"):
        result["created_time"] = created["createdTime"]
    return result


def _author(data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    data = data or {}
    author = {"display_name": data.get("displayName", "")}
    if data.get("emailAddress"):
        author["email_address"] = data["emailAddress"]
    if data.get("photoLink"):
        author["photo_link"] = data["photoLink"]
    return author


def _reply_info(reply: Dict[str, Any]) -> Dict[str, Any]:
    info = {
        "reply_id": reply.get("id"),
        "author": _author(reply.get("author")),
        "content": reply.get("content", ""),
        "created_time": reply.get("createdTime", ""),
    }
    for key, api_key in (("html_content", "htmlContent"), ("modified_time", "modifiedTime"), ("deleted", "deleted")):
        if reply.get(api_key):
            info[key] = reply[api_key]
    return info


def _comment_info(comment: Dict[str, Any]) -> Dict[str, Any]:
    info = {
        "comment_id": comment.get("id"),
        "author": _author(comment.get("author")),
        "content": comment.get("content", ""),
        "resolved": bool(comment.get("resolved")),
        "created_time": comment.get("createdTime", ""),
    }
    for key, api_key in (
        ("html_content", "htmlContent"),
        ("anchor_info", "anchor"),
        ("deleted", "deleted"),
        ("modified_time", "modifiedTime"),
    ):
        if comment.get(api_key):
            info[key] = comment[api_key]
    replies = [_reply_info(reply) for reply in comment.get("replies") or [] if reply]
    if replies:
        info["replies"] = replies
    return info


def list_comments(services: ServiceBundle, params: ListCommentsInput) -> Dict[str, Any]:
    """List comments across all result pages; resolved ones only on request."""
    comments: List[Dict[str, Any]] = []
    page_token = None

    while True:
        with remote_errors("presentation", "list comments"):
            page = services.drive.list_comments(params.presentation_id, page_token)

        for comment in page.get("comments") or []:
            if not comment:
                continue
            if comment.get("resolved") and not params.include_resolved:
                continue
            comments.append(_comment_info(comment))

        page_token = page.get("nextPageToken")
        if not page_token:
            break

    resolved_count = sum(1 for comment in comments if comment["resolved"])
    logger.info(f"Listed {len(comments)} comments for {params.presentation_id}")
    return {
        "presentation_id": params.presentation_id,
        "comments": comments,
        "total_count": len(comments),
        "unresolved_count": len(comments) - resolved_count,
        "resolved_count": resolved_count,
    }


def manage_comment(services: ServiceBundle, params: ManageCommentInput) -> Dict[str, Any]:
    """
    Reply to, resolve, reopen or delete a comment.

    Resolving and reopening are done by posting a reply with the matching
    action, which is how Drive changes a comment's resolved state.
    """
    comment_id = validate_required_text(params.comment_id, "comment_id").strip()
    action = validate_choice(params.action, COMMENT_ACTIONS, "action", upper=False)
    if action == "reply":
        content = validate_required_text(params.content, "content").strip()

    result = {
        "presentation_id": params.presentation_id,
        "comment_id": comment_id,
        "action": action,
        "success": True,
    }

    with remote_errors("comment", f"{action} comment"):
        if action == "reply":
            reply = services.drive.create_reply(params.presentation_id, comment_id, content=content)
            result["reply_id"] = reply.get("id")
            result["message"] = "Reply added successfully"
        elif action == "resolve":
            services.drive.create_reply(params.presentation_id, comment_id, action="resolve")
            result["message"] = "Comment resolved successfully"
        elif action == "unresolve":
            services.drive.create_reply(params.presentation_id, comment_id, action="reopen")
            result["message"] = "Comment reopened successfully"
        else:
            services.drive.delete_comment(params.presentation_id, comment_id)
            result["message"] = "Comment deleted successfully"

    logger.info(f"Comment {comment_id}: {action}")
    return result


def get_comment_tools() -> List[ToolDefinition]:
    return [
        ToolDefinition(
            "add_comment",
            "Add a comment to a presentation, optionally anchored to an object or a slide (0-based).",
            AddCommentInput,
            add_comment,
            "comments"
        ),
        ToolDefinition(
            "list_comments",
            "List comments with authors and replies. Resolved comments are skipped unless include_resolved is set.",
            ListCommentsInput,
            list_comments,
            "comments"
        ),
        ToolDefinition(
            "manage_comment",
            "Reply to, resolve, unresolve or delete a comment.",
            ManageCommentInput,
            manage_comment,
            "comments"
        ),
    ]
