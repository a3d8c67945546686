from fastapi import APIRouter
import subprocess

from scraper_service.routes.health import SERVICE_NAME, SERVICE_VERSION
from scraper_service.schemas.common import VersionResponse

router = APIRouter()


def get_git_sha() -> str:
    """Get git SHA, fallback to 'unknown' if not in git repo."""
    try:
        return (
            subprocess.check_output(["git", "rev-parse", "HEAD"]).decode().strip()[:7]
        )
    except (subprocess.CalledProcessError, FileNotFoundError):
        return "unknown"


@router.get("/version", response_model=VersionResponse)
async def get_version():
    """Return API version + git sha"""
    return VersionResponse(
        name=SERVICE_NAME,
        version=SERVICE_VERSION,
        git_sha=get_git_sha(),
    )
