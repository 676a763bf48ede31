import sys
from pathlib import Path

# Makes `import dirlist` resolve to the local sources, without installing
SOURCES = str(Path(__file__).resolve().parent.parent / "src" / "py")

if SOURCES not in sys.path:
    sys.path.insert(0, SOURCES)

# EOF
