# stitch/cli/commands/__init__.py
# Command modules; each registers itself on the root app at import time
