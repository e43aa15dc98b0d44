import uvicorn

from grade_api.core.config import load_settings


def main():
    settings = load_settings()
    uvicorn.run(
        "grade_api.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
    )


if __name__ == "__main__":
    main()
