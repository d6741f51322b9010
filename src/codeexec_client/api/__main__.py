import uvicorn

from ..config import Config
from .main import create_app


def main() -> None:
    config = Config.from_env()
    uvicorn.run(create_app(config), host="0.0.0.0", port=config.port)


if __name__ == "__main__":
    main()
