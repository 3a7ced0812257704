"""Security audit logging module"""
import logging
import uuid
from typing import Optional
from fastapi import Request


security_logger = logging.getLogger("security_audit")
security_logger.setLevel(logging.INFO)


def get_request_id(request: Request) -> str:
    """Get or create request ID for correlation"""
    if hasattr(request.state, 'request_id'):
        return request.state.request_id
    return str(uuid.uuid4())[:8]


def get_client_ip(request: Request) -> str:
    """Get real client IP from request"""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def log_auth_event(
    event_type: str,
    email: Optional[str] = None,
    user_id: Optional[str] = None,
    success: bool = True,
    details: Optional[str] = None,
    ip_address: Optional[str] = None,
    request_id: Optional[str] = None
):
    """Log authentication-related events"""
    status = "SUCCESS" if success else "FAILURE"
    message = f"AUTH:{event_type} | status={status}"

    if email:
        message += f" | email={email}"
    if user_id:
        message += f" | user_id={user_id}"
    if ip_address:
        message += f" | ip={ip_address}"
    if details:
        message += f" | details={details}"
    message += f" | request_id={request_id or 'N/A'}"

    if success:
        security_logger.info(message)
    else:
        security_logger.warning(message)
