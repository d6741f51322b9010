"""
Expose the FastAPI application factory.

The application is built from environment configuration, which makes it
easy to run with Uvicorn using the factory flag:

```sh
uvicorn --factory codeexec_client.api:app_from_env
```

or simply ``python -m codeexec_client.api``.
"""

from fastapi import FastAPI

from ..config import Config
from .main import create_app


def app_from_env() -> FastAPI:
    return create_app(Config.from_env())


__all__ = ["create_app", "app_from_env"]
