# stitch/ai/__init__.py
# AI provider clients, result types & prompt builders

from .types import APICallContext, GenerateResult

__all__ = ["APICallContext", "GenerateResult"]
