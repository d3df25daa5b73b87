import uvicorn

from erp_api.core.config import settings


def main():
    uvicorn.run(
        "erp_api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    main()
