import logging
import sys

import uvicorn

from remitos.config import load_settings
from remitos.errors import ConfigError


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    log = logging.getLogger("remitos")

    try:
        settings = load_settings()
    except ConfigError as e:
        log.error("configuración inválida: %s", e)
        sys.exit(1)

    log.info("Backend corriendo en http://localhost:%d", settings.port)
    uvicorn.run("remitos.web.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
