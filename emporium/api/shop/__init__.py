"""Shop API mounted under ``/api/shop``."""
from fastapi import APIRouter, Depends

from emporium.api.deps import require_feature
from emporium.utils.feature_flags import shop_feature_enabled

from .carts import router as carts_router
from .catalog import router as catalog_router
from .sales import router as sales_router

PREFIX = "/api/shop"

router = APIRouter(dependencies=[Depends(require_feature(shop_feature_enabled))])
for _child in (catalog_router, carts_router, sales_router):
    router.include_router(_child, prefix=PREFIX)
