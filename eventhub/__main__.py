# Server launcher - `python -m eventhub` or the `eventhub-server` script

import uvicorn

from eventhub.core.config import settings


def main():
    uvicorn.run("eventhub.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
