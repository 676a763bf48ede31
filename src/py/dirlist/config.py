from os import getenv

# NOTE: These are the defaults of the command line flags, which override
# them. Values stay strings so that they're validated like flags are.
ROOT: str = getenv("DIRLIST_ROOT", ".")
PORT: str = getenv("DIRLIST_PORT", "5555")

# An empty host binds all the interfaces
HOST: str = getenv("DIRLIST_HOST", "")  # nosec: B104

MODE: str = getenv("DIRLIST_MODE", "lexy")
FILTER: str = getenv("DIRLIST_FILTER", "video")

LOG_REQUESTS: bool = getenv("DIRLIST_LOG_REQUESTS", "1") == "1"

# EOF
