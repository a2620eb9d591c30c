# stitch/cli/__init__.py
# Typer CLI package; the root app lives in cli.app (imported lazily to keep core imports light)
