# stitch/config/__init__.py
# Settings & environment validation
