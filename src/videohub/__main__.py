import uvicorn

from videohub.config import settings


def run():
    uvicorn.run("videohub.main:app", host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
