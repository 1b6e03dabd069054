import uvicorn

from neoride.core.config import settings

if __name__ == "__main__":
    print(f"🚀 Starting {settings.APP_NAME} on {settings.HOST}:{settings.PORT} ({settings.ENVIRONMENT})")
    reload = settings.ENVIRONMENT == "development"
    uvicorn.run(
        "neoride.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=reload,
        log_level=settings.LOG_LEVEL.lower(),
    )
