"""
Tests for comment tools.
"""

import json

import pytest

from gslides_mcp.tools.comments import (
    AddCommentInput,
    ListCommentsInput,
    ManageCommentInput,
    add_comment,
    build_anchor,
    list_comments,
    manage_comment
)
from gslides_mcp.utils.exceptions import InvalidArgumentError, NotFoundError, RemoteAPIError


# ============================================================================
# Anchors and add_comment
# ============================================================================

def test_build_anchor_for_object():
    """Test object anchors use the compact JSON form."""
    assert build_anchor("shape_1") == '{"r":"content","a":[{"n":"objectId","v":"shape_1"}]}'


def test_build_anchor_for_page_is_one_based():
    """Test page anchors carry a 1-based page number as a string."""
    anchor = json.loads(build_anchor(page_index=0))
    assert anchor == {"r": "content", "a": [{"n": "pageNumber", "v": "1"}]}


def test_build_anchor_prefers_object():
    """Test an object anchor wins over a page anchor."""
    assert "objectId" in build_anchor("shape_1", 3)
    assert build_anchor() is None


class TestAddComment:
    """Creating comments."""

    def test_unanchored(self, mock_services):
        mock_services.drive.create_comment.return_value = {
            "id": "c1", "content": "Looks good", "createdTime": "2024-01-01T00:00:00Z"
        }
        result = add_comment(mock_services, AddCommentInput(presentation_id="pres-123", content="Looks good"))

        mock_services.drive.create_comment.assert_called_once_with("pres-123", "Looks good", None)
        assert result == {
            "comment_id": "c1",
            "presentation_id": "pres-123",
            "content": "Looks good",
            "created_time": "2024-01-01T00:00:00Z",
        }

    def test_anchored_to_slide(self, mock_services):
        mock_services.drive.create_comment.return_value = {"id": "c2", "anchor": "anchor-json"}
        result = add_comment(mock_services, AddCommentInput(
            presentation_id="pres-123", content="Fix this", anchor_page_index=2
        ))

        anchor = mock_services.drive.create_comment.call_args[0][2]
        assert json.loads(anchor)["a"][0] == {"n": "pageNumber", "v": "3"}
        assert result["anchor_info"] == "anchor-json"
        assert result["content"] == "Fix this"

    def test_blank_content(self, mock_services):
        with pytest.raises(InvalidArgumentError):
            add_comment(mock_services, AddCommentInput(presentation_id="pres-123", content=" "))
        mock_services.drive.create_comment.assert_not_called()

    def test_negative_page(self, mock_services):
        with pytest.raises(InvalidArgumentError):
            add_comment(mock_services, AddCommentInput(presentation_id="pres-123", content="x", anchor_page_index=-1))

    def test_missing_presentation(self, mock_services):
        mock_services.drive.create_comment.side_effect = Exception("File not found: pres-123")
        with pytest.raises(NotFoundError):
            add_comment(mock_services, AddCommentInput(presentation_id="pres-123", content="x"))


# ============================================================================
# list_comments
# ============================================================================

class TestListComments:
    """Listing comments."""

    def test_paginates_and_skips_resolved(self, mock_services):
        mock_services.drive.list_comments.side_effect = [
            {
                "comments": [
                    {
                        "id": "c1",
                        "content": "First",
                        "author": {"displayName": "Ana", "emailAddress": "ana@example.com"},
                        "createdTime": "t1",
                        "anchor": "a1",
                        "replies": [{"id": "r1", "content": "Thanks", "author": {"displayName": "Bo"}, "createdTime": "t2"}],
                    },
                    {"id": "c2", "content": "Done", "resolved": True},
                ],
                "nextPageToken": "page-2",
            },
            {"comments": [{"id": "c3", "content": "Second page"}, None]},
        ]

        result = list_comments(mock_services, ListCommentsInput(presentation_id="pres-123"))

        assert mock_services.drive.list_comments.call_args_list[1][0] == ("pres-123", "page-2")
        assert [comment["comment_id"] for comment in result["comments"]] == ["c1", "c3"]
        first = result["comments"][0]
        assert first["author"] == {"display_name": "Ana", "email_address": "ana@example.com"}
        assert first["anchor_info"] == "a1"
        assert first["replies"] == [{
            "reply_id": "r1",
            "author": {"display_name": "Bo"},
            "content": "Thanks",
            "created_time": "t2",
        }]
        assert result["total_count"] == 2
        assert result["unresolved_count"] == 2
        assert result["resolved_count"] == 0

    def test_include_resolved(self, mock_services):
        mock_services.drive.list_comments.return_value = {
            "comments": [{"id": "c1", "resolved": True}, {"id": "c2"}]
        }
        result = list_comments(mock_services, ListCommentsInput(presentation_id="pres-123", include_resolved=True))

        assert result["total_count"] == 2
        assert result["resolved_count"] == 1
        assert result["comments"][0]["resolved"] is True
        assert "replies" not in result["comments"][1]

    def test_empty(self, mock_services):
        result = list_comments(mock_services, ListCommentsInput(presentation_id="pres-123"))
        assert result["comments"] == []
        assert result["total_count"] == 0


# ============================================================================
# manage_comment
# ============================================================================

class TestManageComment:
    """Reply, resolve, reopen and delete."""

    def test_reply(self, mock_services):
        mock_services.drive.create_reply.return_value = {"id": "r9"}
        result = manage_comment(mock_services, ManageCommentInput(
            presentation_id="pres-123", comment_id="c1", action="reply", content=" On it "
        ))

        mock_services.drive.create_reply.assert_called_once_with("pres-123", "c1", content="On it")
        assert result["reply_id"] == "r9"
        assert result["message"] == "Reply added successfully"
        assert result["success"] is True

    def test_resolve(self, mock_services):
        result = manage_comment(mock_services, ManageCommentInput(presentation_id="pres-123", comment_id="c1", action="Resolve"))
        mock_services.drive.create_reply.assert_called_once_with("pres-123", "c1", action="resolve")
        assert result["action"] == "resolve"
        assert result["message"] == "Comment resolved successfully"

    def test_unresolve_reopens(self, mock_services):
        result = manage_comment(mock_services, ManageCommentInput(presentation_id="pres-123", comment_id="c1", action="unresolve"))
        mock_services.drive.create_reply.assert_called_once_with("pres-123", "c1", action="reopen")
        assert result["message"] == "Comment reopened successfully"

    def test_delete(self, mock_services):
        result = manage_comment(mock_services, ManageCommentInput(presentation_id="pres-123", comment_id="c1", action="delete"))
        mock_services.drive.delete_comment.assert_called_once_with("pres-123", "c1")
        assert result["message"] == "Comment deleted successfully"

    def test_reply_requires_content(self, mock_services):
        with pytest.raises(InvalidArgumentError, match="content"):
            manage_comment(mock_services, ManageCommentInput(presentation_id="pres-123", comment_id="c1", action="reply"))
        mock_services.drive.create_reply.assert_not_called()

    def test_invalid_action(self, mock_services):
        with pytest.raises(InvalidArgumentError, match="action"):
            manage_comment(mock_services, ManageCommentInput(presentation_id="pres-123", comment_id="c1", action="archive"))

    def test_missing_comment(self, mock_services):
        mock_services.drive.delete_comment.side_effect = Exception("Comment not found: c1")
        with pytest.raises(NotFoundError, match="comment not found"):
            manage_comment(mock_services, ManageCommentInput(presentation_id="pres-123", comment_id="c1", action="delete"))

    def test_remote_failure(self, mock_services):
        mock_services.drive.create_reply.side_effect = Exception("backend error")
        with pytest.raises(RemoteAPIError, match="failed to resolve comment"):
            manage_comment(mock_services, ManageCommentInput(presentation_id="pres-123", comment_id="c1", action="resolve"))
