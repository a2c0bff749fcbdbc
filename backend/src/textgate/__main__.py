"""Run the API with uvicorn: ``python -m textgate``."""
import uvicorn

from textgate.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "textgate.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug and settings.app_env == "development",
        log_config=None,
    )
