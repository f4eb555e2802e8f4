import uvicorn  # type: ignore

from app.core import config
from app.utils import get_logger

log = get_logger(__name__)

if __name__ == "__main__":
    log.info("Running CRM server on %s:%s", config.HOST, config.PORT)
    uvicorn.run(
        "app.main:app",
        reload=config.ENVIRONMENT != "production",
        host=config.HOST,
        port=config.PORT,
    )
