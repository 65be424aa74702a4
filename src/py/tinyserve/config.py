from os import getenv
from pathlib import Path

PORT: int = 8080

# Listens on every interface, as the server is meant to be reached from the LAN
HOST: str = "0.0.0.0"  # nosec: B104

# Relative to the working directory the server is started from
WEBROOT: Path = Path("webroot")

LOG_REQUESTS: bool = getenv("TINYSERVE_LOG_REQUESTS", "1") == "1"

LOG_LEVEL: str = getenv("TINYSERVE_LOG_LEVEL", "info").lower()

# EOF
