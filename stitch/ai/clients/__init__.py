# stitch/ai/clients/__init__.py
# Provider clients & model routing

from .factory import get_client, provider_for_model

__all__ = ["get_client", "provider_for_model"]
