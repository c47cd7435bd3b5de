"""Lancement du serveur / Server launcher: python -m diesel_log."""

import uvicorn

from diesel_log.config import settings


def main() -> None:
    uvicorn.run("diesel_log.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
