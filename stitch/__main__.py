# stitch/__main__.py
# Allow `python -m stitch`

from .cli.app import app

if __name__ == "__main__":
    app()
