"""
API endpoints package.

Contains FastAPI routers for all service endpoints:
- /me, /authorize - API key issuance and inspection
- /generate_image - Quota-gated image generation
- /metrics - Prometheus metrics
- /healthz, /readyz - Health checks
"""
from .healthz import router as healthz_router
from .images import router as images_router
from .keys import router as keys_router
from .metrics import router as metrics_router

__all__ = ["healthz_router", "images_router", "keys_router", "metrics_router"]
