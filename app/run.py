# app/run.py
import uvicorn

from app.shared.config import settings


def main():
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENV == "dev",
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
