"""
Audit trail for MCP tool calls.
Logs every dispatched call with its parameters, outcome and duration.
"""

from typing import Dict, Any, Optional
from datetime import datetime, timezone
from uuid import uuid4

from gslides_mcp.utils.logging_config import get_logger


SENSITIVE_KEYS = {
    "password", "secret", "token", "api_key", "client_secret",
    "private_key", "authorization"
}

# Inputs that carry file payloads; only their size is recorded
BINARY_KEYS = {"image_base64"}


class AuditLogger:
    """
    Audit logger for tool calls.
    Writes to the non-propagating "audit" logger.
    """

    def __init__(self):
        """Initialize audit logger."""
        self.logger = get_logger("audit")

    def log_tool_call(
        self,
        tool_name: str,
        parameters: Dict[str, Any],
        result: Optional[Any] = None,
        error: Optional[str] = None,
        duration_ms: Optional[float] = None
    ) -> str:
        """
        Log a tool call.

        Args:
            tool_name: Name of tool
            parameters: Tool arguments as received
            result: Tool result (if successful)
            error: Error message (if failed)
            duration_ms: Call duration in milliseconds

        Returns:
            Audit log entry ID
        """
        log_id = str(uuid4())

        log_entry = {
            "audit_id": log_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "operation": "error" if error else "result",
            "type": "mcp_tool",
            "tool_name": tool_name,
            "server_name": "google-slides-mcp",
            "parameters": self._redact_sensitive_data(parameters),
            "result": self._redact_sensitive_data(result) if result else None,
            "error": error,
            "duration_ms": duration_ms,
        }

        self.logger.info("MCP operation", extra={"extra_data": log_entry})
        return log_id

    def _redact_sensitive_data(self, data: Any) -> Any:
        """
        Redact sensitive data from log entries.

        Args:
            data: Data to redact

        Returns:
            Data with sensitive fields redacted
        """
        if isinstance(data, dict):
            redacted = {}
            for key, value in data.items():
                lowered = str(key).lower()
                if lowered in BINARY_KEYS and isinstance(value, str):
                    redacted[key] = f"[{len(value)} chars]"
                elif any(sensitive in lowered for sensitive in SENSITIVE_KEYS):
                    redacted[key] = "[REDACTED]"
                elif isinstance(value, (dict, list)):
                    redacted[key] = self._redact_sensitive_data(value)
                else:
                    redacted[key] = value
            return redacted
        elif isinstance(data, list):
            return [self._redact_sensitive_data(item) for item in data]
        return data


# Global audit logger instance
_audit_logger: Optional[AuditLogger] = None


def get_audit_logger() -> AuditLogger:
    """
    Get the global audit logger.

    Returns:
        AuditLogger instance
    """
    global _audit_logger

    if _audit_logger is None:
        _audit_logger = AuditLogger()

    return _audit_logger
