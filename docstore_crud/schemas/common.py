"""
DocStore CRUD — Shared Response Schemas
========================================

What:  Error and health response models shared by every route.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    What:  Standardized error body for all API errors.

    Fields:
        error:      Machine-readable kind (validation_error, invalid_id,
                    insert_failed, not_found, database_error,
                    internal_server_error)
        message:    Human-readable description
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "invalid_id",
            "message": "'abc' is not a valid identifier; expected a 24-character hex string",
            "request_id": "1f3a9c2e"
        }
    """
    error: str = Field(description="Machine-readable error kind")
    message: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and database status.
    Who:   Returned by GET /health for container probes and load balancers.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="MongoDB connectivity: connected, disconnected")
    resources: List[str] = Field(description="Resource paths served by this process")
    uptime_seconds: float = Field(description="Seconds since service started")
