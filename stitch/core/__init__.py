# stitch/core/__init__.py
# Pure core: exceptions, error envelope, validation & output registry
