import logging

import uvicorn
from workplan.api.api_run import app
from workplan.utilities.config import APP_HOST, APP_PORT, LOG_LEVEL
from workplan.utilities.network import service_urls


if __name__ == "__main__":
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    urls = service_urls(APP_PORT)
    print(f"Uvicorn running on {urls[0]} (Press CTRL+C to quit)")
    # LAN address for branch offices on the same network
    if len(urls) > 1:
        print(f"Accessible from other devices at: {urls[1]}")
    uvicorn.run(app, host=APP_HOST, port=APP_PORT)
