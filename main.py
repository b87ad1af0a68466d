from fastapi import FastAPI

from reflectai import __version__
from reflectai.api.endpoints import router
from reflectai.core.config import settings
from reflectai.shared.correlation import CorrelationMiddleware
from reflectai.shared.errors import register_exception_handlers
from reflectai.shared.logging_config import setup_logging

setup_logging(service_name=settings.SERVICE_NAME)


def create_app() -> FastAPI:
    app = FastAPI(
        title="ReflectAI Journal Service",
        description="Personal journaling with AI-generated reflections",
        version=__version__,
    )
    app.add_middleware(CorrelationMiddleware)
    register_exception_handlers(app)
    app.include_router(router, prefix="/api/v1")

    @app.get("/")
    async def root():
        return {"message": "ReflectAI Journal Service Running"}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
