"""
DocStore CRUD — Application Configuration
==========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time.

Every default matches the values the service used to hardcode
(MongoDB on localhost:27017, users/hrms databases, port 8080), so an
unconfigured process behaves exactly like the original deployment.
"""

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import List

KNOWN_RESOURCES = ("user", "employee")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes are grouped by concern for readability.
    """

    # ── MongoDB ───────────────────────────────────────────────────────────
    # Format: mongodb://[user:password@]host:port[/authdb]
    mongo_url: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection string",
    )

    # Upper bound on pooled connections held by the driver
    mongo_max_pool_size: int = Field(default=100, ge=1, le=500)

    # How long the driver waits to find a usable server before failing a call
    mongo_server_selection_timeout_ms: int = Field(default=5000, ge=100, le=60000)

    # ── Resource bindings ─────────────────────────────────────────────────
    user_database: str = Field(default="users")
    user_collection: str = Field(default="users")

    employee_database: str = Field(default="hrms")
    employee_collection: str = Field(default="employees")

    # What: Which resources this process serves
    # Format: Comma-separated resource names (parsed by the property below)
    # Example: ENABLED_RESOURCES=employee runs an employee-only deployment
    enabled_resources: str = Field(default="user,employee")

    @field_validator("enabled_resources")
    @classmethod
    def validate_enabled_resources(cls, v: str) -> str:
        """Rejects unknown resource names and empty selections."""
        names = [name.strip().lower() for name in v.split(",") if name.strip()]
        if not names:
            raise ValueError("enabled_resources must name at least one resource")
        unknown = sorted(set(names) - set(KNOWN_RESOURCES))
        if unknown:
            raise ValueError(
                f"Unknown resource(s) {unknown}. Must be drawn from: {list(KNOWN_RESOURCES)}"
            )
        return ",".join(names)

    @property
    def enabled_resources_list(self) -> List[str]:
        """Splits the comma-separated resource names into a list (order preserved)."""
        return list(dict.fromkeys(self.enabled_resources.split(",")))

    # PUT responds with the post-update document when True, and with the
    # document as it was before the $set when False. Earlier deployments of
    # this service returned the pre-update document; set False to keep that.
    return_updated_document: bool = Field(default=True)

    # ── CORS ──────────────────────────────────────────────────────────────
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8080, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # MONGO_URL and mongo_url both work
    }


# Singleton instance, imported throughout the application
settings = Settings()
