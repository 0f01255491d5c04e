from pydantic import BaseModel, Field


class InfoResponse(BaseModel):
    """Response payload for the /api/info endpoint."""

    service_app_name: str = Field(..., description="Service name.")
    service_version: str = Field(..., description="Service version string.")
    service_model: str = Field(..., description="Document Intelligence model id.")
    credentials_configured: bool = Field(..., description="False while placeholder credentials are in use.")
