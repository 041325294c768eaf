import uvicorn

from schoolorganizer.config.settings import settings


def run() -> None:
    uvicorn.run("schoolorganizer.app:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
