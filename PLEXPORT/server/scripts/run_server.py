from __future__ import annotations

import uvicorn

from PLEXPORT.server.utils.logger import logger
from PLEXPORT.server.utils.variables import env_variables


###############################################################################
if __name__ == "__main__":
    host = env_variables.host
    port = env_variables.port
    logger.info("Starting PLEXPORT server on %s:%d", host, port)
    uvicorn.run("PLEXPORT.server.app:app", host=host, port=port)
