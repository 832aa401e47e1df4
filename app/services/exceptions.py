"""Domain-specific exceptions for service layer operations.

Every error raised by a service derives from ``ServiceError`` and carries
enough context (error code, HTTP status, category, severity and the request
correlation id) for the API layer to turn it into a response without
knowing which service raised it.

Architecture:
- ServiceError: Base exception with correlation ID and context support
- Category Base Classes: AuthError, ValidationError, BusinessError, InfrastructureError
- Specific Exceptions: group, wallet, payment and order failures
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union
from http import HTTPStatus


class ErrorSeverity(Enum):
    """Error severity levels for logging and monitoring."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories for classification and handling."""
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    EXTERNAL_SERVICE = "external_service"
    INFRASTRUCTURE = "infrastructure"
    SYSTEM = "system"


class ServiceError(Exception):
    """Base exception for all service layer errors.

    Attributes:
        message: Human-readable error message for logs
        error_code: Machine-readable error code for client handling
        correlation_id: Request correlation ID for tracing
        details: Additional error context (only exposed when asked for)
        user_message: Message safe to show to the client
        severity: Error severity level for logging/monitoring
        category: Error category for classification
        http_status: HTTP status code for API responses
    """

    def __init__(
        self,
        message: str,
        error_code: str = "SERVICE_ERROR",
        correlation_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.SYSTEM,
        http_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.correlation_id = correlation_id
        self.details = details or {}
        self.user_message = user_message or message
        self.severity = severity
        self.category = category
        self.http_status = http_status

    def to_dict(self, include_sensitive: bool = False) -> Dict[str, Any]:
        """Convert exception to dictionary for logging or client response."""
        result = {
            "error_code": self.error_code,
            "message": self.user_message,
            "severity": self.severity.value,
            "category": self.category.value,
            "http_status": self.http_status.value
        }

        if self.correlation_id:
            result["correlation_id"] = self.correlation_id

        if include_sensitive and self.details:
            result["details"] = self.details
            result["internal_message"] = self.message

        return result

    def __str__(self) -> str:
        return f"{self.error_code}: {self.message}"


# =============================================================================
# AUTHENTICATION & AUTHORIZATION ERRORS
# =============================================================================

class AuthError(ServiceError):
    """Base class for authentication and authorization errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        correlation_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.AUTHENTICATION,
        http_status: HTTPStatus = HTTPStatus.UNAUTHORIZED
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            correlation_id=correlation_id,
            details=details,
            user_message=user_message,
            severity=severity,
            category=category,
            http_status=http_status
        )


class AuthenticationError(AuthError):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication failed",
        correlation_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code="AUTH_FAILED",
            correlation_id=correlation_id,
            details=details,
            user_message="Authentication failed. Please check your credentials."
        )


class UserInactiveError(AuthError):
    """User account is inactive."""

    def __init__(self, user_id: int, correlation_id: Optional[str] = None):
        super().__init__(
            message="User account is inactive",
            error_code="USER_INACTIVE",
            correlation_id=correlation_id,
            details={"user_id": user_id},
            user_message="Your account is inactive. Please contact support.",
            category=ErrorCategory.AUTHORIZATION,
            http_status=HTTPStatus.FORBIDDEN
        )


class EmailAlreadyExistsError(AuthError):
    """Email address is already registered."""

    def __init__(self, email: str, correlation_id: Optional[str] = None):
        super().__init__(
            message="Email address already registered",
            error_code="EMAIL_EXISTS",
            correlation_id=correlation_id,
            details={"email": email},
            user_message="This email address is already registered. Please use a different email or try logging in.",
            category=ErrorCategory.CONFLICT,
            http_status=HTTPStatus.CONFLICT
        )


class PermissionDeniedError(ServiceError):
    """Caller is authenticated but not allowed to perform the action."""

    def __init__(
        self,
        action: str,
        error_code: str = "PERMISSION_DENIED",
        correlation_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(
            message=f"Permission denied: {action}",
            error_code=error_code,
            correlation_id=correlation_id,
            details={"action": action, **(details or {})},
            user_message=user_message or "You don't have permission to perform this action.",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.AUTHORIZATION,
            http_status=HTTPStatus.FORBIDDEN
        )


# =============================================================================
# VALIDATION ERRORS
# =============================================================================

class ValidationError(ServiceError):
    """Input validation failed."""

    def __init__(
        self,
        field: str,
        message: str,
        correlation_id: Optional[str] = None,
        validation_errors: Optional[List[Dict[str, str]]] = None
    ):
        details = {"field": field, "validation_message": message}
        if validation_errors:
            details["validation_errors"] = validation_errors

        super().__init__(
            message=f"Validation failed for {field}: {message}",
            error_code="VALIDATION_ERROR",
            correlation_id=correlation_id,
            details=details,
            user_message=f"Invalid {field}: {message}",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
            http_status=HTTPStatus.BAD_REQUEST
        )


# =============================================================================
# BUSINESS DOMAIN ERRORS
# =============================================================================

class BusinessError(ServiceError):
    """Base class for business domain errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        correlation_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.BUSINESS_RULE,
        http_status: HTTPStatus = HTTPStatus.BAD_REQUEST
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            correlation_id=correlation_id,
            details=details,
            user_message=user_message,
            severity=severity,
            category=category,
            http_status=http_status
        )


class ResourceNotFoundError(BusinessError):
    """Base class for resource not found errors."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Union[int, str],
        user_id: Optional[int] = None,
        correlation_id: Optional[str] = None
    ):
        details = {"resource_type": resource_type, "resource_id": resource_id}
        if user_id is not None:
            details["user_id"] = user_id

        super().__init__(
            message=f"{resource_type} {resource_id} not found",
            error_code=f"{resource_type.upper()}_NOT_FOUND",
            correlation_id=correlation_id,
            details=details,
            user_message=f"{resource_type} not found or you don't have permission to access it.",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.RESOURCE_NOT_FOUND,
            http_status=HTTPStatus.NOT_FOUND
        )


NotFoundError = ResourceNotFoundError


class ConflictError(BusinessError):
    """Request conflicts with the current state of a resource."""

    def __init__(
        self,
        message: str,
        error_code: str,
        correlation_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            correlation_id=correlation_id,
            details=details,
            user_message=user_message,
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.CONFLICT,
            http_status=HTTPStatus.CONFLICT
        )


class UserNotFoundError(ResourceNotFoundError):
    """User does not exist (or was soft deleted)."""

    def __init__(self, user_id: Union[int, str], correlation_id: Optional[str] = None):
        super().__init__(resource_type="User", resource_id=user_id, correlation_id=correlation_id)


class ProductNotFoundError(ResourceNotFoundError):

    def __init__(self, product_id: int, correlation_id: Optional[str] = None):
        super().__init__(resource_type="Product", resource_id=product_id, correlation_id=correlation_id)


# =============================================================================
# GROUP DOMAIN ERRORS
# =============================================================================

class GroupNotFoundError(ResourceNotFoundError):
    """Group does not exist or is no longer active."""

    def __init__(self, group_id: Union[int, str], correlation_id: Optional[str] = None):
        super().__init__(resource_type="Group", resource_id=group_id, correlation_id=correlation_id)


class MembershipNotFoundError(ResourceNotFoundError):
    """User is not a member of the group."""

    def __init__(self, group_id: int, user_id: int, correlation_id: Optional[str] = None):
        super().__init__(
            resource_type="Membership",
            resource_id=group_id,
            user_id=user_id,
            correlation_id=correlation_id
        )


class AlreadyMemberError(ConflictError):
    """User already belongs to the group."""

    def __init__(self, group_id: int, user_id: int, correlation_id: Optional[str] = None):
        super().__init__(
            message=f"User {user_id} is already a member of group {group_id}",
            error_code="ALREADY_MEMBER",
            correlation_id=correlation_id,
            details={"group_id": group_id, "user_id": user_id},
            user_message="You are already a member of this group."
        )


class GroupFullError(BusinessError):
    """Group has reached its member limit."""

    def __init__(self, group_id: int, max_members: int, correlation_id: Optional[str] = None):
        super().__init__(
            message=f"Group {group_id} is full ({max_members} members)",
            error_code="GROUP_FULL",
            correlation_id=correlation_id,
            details={"group_id": group_id, "max_members": max_members},
            user_message=f"This group is full. Groups can have at most {max_members} members."
        )


class GroupPermissionError(PermissionDeniedError):
    """Only the group creator may perform this action."""

    def __init__(self, group_id: int, user_id: int, action: str, correlation_id: Optional[str] = None):
        super().__init__(
            action=action,
            error_code="GROUP_PERMISSION_DENIED",
            correlation_id=correlation_id,
            details={"group_id": group_id, "user_id": user_id},
            user_message="Only the group creator can do this."
        )


# =============================================================================
# WALLET DOMAIN ERRORS
# =============================================================================

class InsufficientFundsError(BusinessError):
    """A debit would take the wallet balance below zero."""

    def __init__(self, user_id: int, amount: int, correlation_id: Optional[str] = None):
        super().__init__(
            message=f"Insufficient funds for user {user_id} to apply {amount}",
            error_code="INSUFFICIENT_FUNDS",
            correlation_id=correlation_id,
            details={"user_id": user_id, "amount": amount},
            user_message="Your wallet balance is too low for this transaction."
        )


# =============================================================================
# ORDER DOMAIN ERRORS
# =============================================================================

class OrderNotFoundError(ResourceNotFoundError):

    def __init__(self, order_id: int, user_id: Optional[int] = None, correlation_id: Optional[str] = None):
        super().__init__(resource_type="Order", resource_id=order_id, user_id=user_id, correlation_id=correlation_id)


class InvalidStatusTransitionError(ConflictError):
    """Order status may only move to its immediate successor."""

    def __init__(
        self,
        order_id: int,
        current_status: str,
        requested_status: str,
        correlation_id: Optional[str] = None
    ):
        super().__init__(
            message=f"Order {order_id} cannot move from {current_status} to {requested_status}",
            error_code="INVALID_STATUS_TRANSITION",
            correlation_id=correlation_id,
            details={
                "order_id": order_id,
                "current_status": current_status,
                "requested_status": requested_status,
            },
            user_message=f"Order is {current_status} and cannot be moved to {requested_status}."
        )


class OrderPermissionError(PermissionDeniedError):
    """Only administrators may advance order status."""

    def __init__(self, order_id: int, user_id: int, correlation_id: Optional[str] = None):
        super().__init__(
            action="advance order status",
            error_code="ORDER_PERMISSION_DENIED",
            correlation_id=correlation_id,
            details={"order_id": order_id, "user_id": user_id},
            user_message="Only administrators can update order status."
        )


# =============================================================================
# INFRASTRUCTURE & EXTERNAL SERVICE ERRORS
# =============================================================================

class InfrastructureError(ServiceError):
    """Base class for infrastructure-related errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        correlation_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
        severity: ErrorSeverity = ErrorSeverity.HIGH,
        category: ErrorCategory = ErrorCategory.INFRASTRUCTURE,
        http_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            correlation_id=correlation_id,
            details=details,
            user_message=user_message or "A system error occurred. Please try again later.",
            severity=severity,
            category=category,
            http_status=http_status
        )


class PersistenceError(InfrastructureError):
    """The database rejected or failed a write; the transaction was rolled back."""

    def __init__(self, operation: str, reason: str, correlation_id: Optional[str] = None):
        super().__init__(
            message=f"Persistence failure during {operation}: {reason}",
            error_code="PERSISTENCE_ERROR",
            correlation_id=correlation_id,
            details={"operation": operation, "reason": reason},
            severity=ErrorSeverity.CRITICAL
        )


class ExternalServiceError(InfrastructureError):
    """A third-party dependency (email API, QR renderer) failed."""

    def __init__(
        self,
        provider: str,
        reason: str,
        error_code: str = "EXTERNAL_SERVICE_ERROR",
        correlation_id: Optional[str] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(
            message=f"{provider} failed: {reason}",
            error_code=error_code,
            correlation_id=correlation_id,
            details={"provider": provider, "reason": reason},
            user_message=user_message,
            category=ErrorCategory.EXTERNAL_SERVICE,
            http_status=HTTPStatus.BAD_GATEWAY
        )


class PaymentIntentRenderError(ExternalServiceError):
    """QR rendering of a payment intent failed."""

    def __init__(self, reason: str, correlation_id: Optional[str] = None):
        super().__init__(
            provider="qrcode",
            reason=reason,
            error_code="PAYMENT_INTENT_RENDER_FAILED",
            correlation_id=correlation_id,
            user_message="Unable to generate the payment QR code. Please try again."
        )


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def create_error_response(
    error: ServiceError,
    include_details: bool = False
) -> Dict[str, Any]:
    """Create standardized error response body for a ServiceError."""
    return {
        "detail": error.user_message,
        "error": error.to_dict(include_sensitive=include_details),
    }
