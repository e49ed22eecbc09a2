import logging

import uvicorn

from escritorio.config import settings

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

if __name__ == "__main__":
    uvicorn.run(
        "escritorio.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
    )
