# stitch/__init__.py
# Stitch: chat-style resume editing w/ field paths, a prioritized AI request queue & re-scoring

__version__ = "0.1.0"
