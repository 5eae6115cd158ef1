"""Error taxonomy shared by the store adapter, services and API."""
from typing import Any, Dict, List, Optional


class BlogServiceError(Exception):
    """Base class for errors that map to an API response."""

    status_code = 500

    def __init__(self, message: str, payload: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.payload = payload

    def to_dict(self) -> Dict[str, Any]:
        rv = dict(self.payload or ())
        rv["error"] = self.message
        return rv


class ValidationError(BlogServiceError):
    """A field failed validation; the store was not contacted."""

    status_code = 400

    def __init__(self, field: str, reason: str):
        super().__init__(f"{field}: {reason}", {"field": field, "reason": reason})
        self.field = field
        self.reason = reason


class NotFound(BlogServiceError):
    status_code = 404

    def __init__(self, kind: str, identifier: str):
        super().__init__(f"{kind} {identifier} not found", {"kind": kind, "id": identifier})
        self.kind = kind
        self.identifier = identifier


class DuplicateName(BlogServiceError):
    status_code = 409

    def __init__(self, name: str):
        super().__init__(f"Category name already exists: {name}", {"name": name})
        self.name = name


class AuthError(BlogServiceError):
    """Sign-in failure reported by the identity provider."""

    INVALID_CREDENTIALS = "invalid-credentials"
    UNKNOWN_USER = "unknown-user"
    MALFORMED_ADDRESS = "malformed-address"

    status_code = 401

    def __init__(self, kind: str):
        super().__init__(f"Authentication failed: {kind}", {"kind": kind})
        self.kind = kind


class PermissionDenied(BlogServiceError):
    status_code = 403

    def __init__(self, message: str = "Only the site administrator can do this"):
        super().__init__(message)


class IndexUnavailable(BlogServiceError):
    """The store needs a composite index that does not exist."""

    def __init__(self, index_name: str):
        super().__init__(f"Index {index_name} is not available", {"index": index_name})
        self.index_name = index_name


class PartialFailure(BlogServiceError):
    """Some of a batch of independent article updates failed."""

    status_code = 207

    def __init__(self, updated_count: int, failed_ids: List[str]):
        super().__init__(
            f"{len(failed_ids)} article updates failed",
            {"updated_count": updated_count, "failed_ids": failed_ids}
        )
        self.updated_count = updated_count
        self.failed_ids = failed_ids


class StoreUnavailable(BlogServiceError):
    """A backing collaborator (database or identity provider) is unreachable."""

    status_code = 503


class AuthenticationRequired(BlogServiceError):
    """No signed-in identity on a route that needs one."""

    status_code = 401

    def __init__(self, message: str = "Sign in required"):
        super().__init__(message)
