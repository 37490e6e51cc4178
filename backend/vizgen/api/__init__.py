from fastapi import APIRouter

from vizgen.api.charts import router as charts_router
from vizgen.api.datasets import router as datasets_router
from vizgen.api.health import router as health_router

router = APIRouter()
router.include_router(health_router)
router.include_router(datasets_router)
router.include_router(charts_router)
