# stitch/assistant/__init__.py
# Natural-language edit parsing & edit session orchestration
