# src/poshanix_proxy/__main__.py
import uvicorn
from dotenv import load_dotenv

from poshanix_proxy.core.config import get_settings


def main() -> None:
    # PORT / HOST may come from .env
    load_dotenv()
    settings = get_settings()
    uvicorn.run(
        "poshanix_proxy.app:app",
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    main()
