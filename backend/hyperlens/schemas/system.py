"""
System-related schemas for the HyperLens API.
"""

from pydantic import BaseModel, ConfigDict, field_validator


class HealthCheck(BaseModel):
    """
    System health check response.

    Attributes:
        status: Overall status (ok/degraded)
        services: Service name -> status
        version: Current version
        uptime_seconds: Process uptime in seconds
    """

    model_config = ConfigDict(from_attributes=True)

    status: str
    services: dict[str, str]
    version: str
    uptime_seconds: float

    @field_validator('uptime_seconds')
    @classmethod
    def validate_uptime(cls, v: float) -> float:
        """Validate uptime is non-negative."""
        if v < 0:
            raise ValueError('uptime_seconds must be non-negative')
        return v


class VersionInfo(BaseModel):
    """
    Version information.

    Attributes:
        version: Semantic version string
        codename: Release codename
        updated_at: Last update timestamp
    """

    version: str
    codename: str
    updated_at: str
