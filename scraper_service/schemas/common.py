from datetime import datetime

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    name: str
    version: str
    environment: str
    timestamp: datetime
    endpoints: dict[str, str]


class VersionResponse(BaseModel):
    name: str
    version: str
    git_sha: str
