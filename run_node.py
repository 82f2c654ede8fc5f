import uvicorn
import logging

from beerus.config import load_config

# Suppress uvicorn's default logging and warnings
uvicorn_loggers = [
    logging.getLogger("uvicorn"),
    logging.getLogger("uvicorn.error"),
    logging.getLogger("uvicorn.access"),
    logging.getLogger("uvicorn.asgi"),
]

for uvicorn_logger in uvicorn_loggers:
    # Only show ERROR and CRITICAL, suppress WARNING
    uvicorn_logger.setLevel(logging.ERROR)
    # Remove handlers to prevent duplicate output
    uvicorn_logger.handlers = []

config = load_config()

if __name__ == "__main__":
    uvicorn.run(
        "beerus.node.main:create_app",
        factory=True,
        host=config.rpc.http.host,
        port=config.rpc.http.port,
        reload=False,
        access_log=False,
        log_config=None
    )
