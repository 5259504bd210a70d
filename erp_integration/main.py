from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from erp_integration.api.v1.endpoints.erp_integration import router as erp_router
from erp_integration.core.erp_logger import configure_erp_logging
from erp_integration.db.session import init_db

_logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_erp_logging()
    init_db()
    _logger.info("ERP integration API started")
    yield


app = FastAPI(title="ERP Integration", lifespan=lifespan)

app.include_router(erp_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=5010)
