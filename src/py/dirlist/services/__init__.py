from .index import IndexService  # NOQA: F401

# EOF
