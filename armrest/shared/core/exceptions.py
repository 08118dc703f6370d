from typing import Optional, Dict, Any


class ArmrestException(Exception):
    """Base exception for all armrest errors."""
    def __init__(
        self,
        message: str,
        code: str = "internal_error",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class ConfigurationError(ArmrestException):
    """Raised when client configuration is invalid or missing."""
    def __init__(self, message: str, code: str = "config_error", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, details=details)


class InvalidArgumentError(ArmrestException):
    """Raised before any network call when caller input is rejected."""
    def __init__(self, message: str, code: str = "invalid_argument", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, details=details)


class MissingResourceGroupError(InvalidArgumentError):
    """Raised when an operation needs a resource group and none was resolved."""
    def __init__(self, message: str = "must specify resource group", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="missing_resource_group", details=details)


class InvalidAccountTypeError(InvalidArgumentError):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="invalid_account_type", details=details)


class InvalidAccountNameError(InvalidArgumentError):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="invalid_account_name", details=details)


class MissingRequiredFieldError(InvalidArgumentError):
    def __init__(self, field: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            f"missing required field '{field}'",
            code="missing_required_field",
            details={"field": field, **(details or {})},
        )
        self.field = field


class InvalidTagsError(InvalidArgumentError):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="invalid_tags", details=details)


class TransportError(ArmrestException):
    """Raised when the ARM endpoint is unreachable or answers with a non-2xx status."""
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, code="transport_error", details=details)
        self.status_code = status_code


class DecodeError(ArmrestException):
    """Raised when a response body is not the JSON shape we expect."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="decode_error", details=details)


class AggregateListError(ArmrestException):
    """
    Raised by a multi-group listing once every group has been queried and at
    least one of them failed. Results from the groups that succeeded are kept
    on ``partial_results``.
    """
    def __init__(
        self,
        failures: Dict[str, Exception],
        partial_results: list[dict[str, Any]],
    ):
        groups = sorted(failures)
        super().__init__(
            f"listing failed for {len(groups)} resource group(s): {', '.join(groups)}",
            code="aggregate_list_error",
            details={"failed_groups": groups},
        )
        self.failures = failures
        self.partial_results = partial_results
