"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


def _get_template_source():
    """Lazy import to avoid startup failures."""
    from ...services.manifest.template_source import get_template_source
    return get_template_source()


@router.get("/health/template", status_code=status.HTTP_200_OK)
def health_template() -> dict:
    """Check that the manifest template can be reached."""
    try:
        source = _get_template_source()
        return {"service": "manifest-template", "healthy": source.check_health()}
    except Exception as e:
        return {"service": "manifest-template", "healthy": False, "error": str(e)}
