import uvicorn
from payments_backend.core.config import get_settings


def main():
    settings = get_settings()
    uvicorn.run(
        "payments_backend.app:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
    )


if __name__ == "__main__":
    main()
