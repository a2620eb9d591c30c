# stitch/queue/__init__.py
# AI request queue package

from .request_queue import (
    AIRequestQueue,
    Priority,
    QueueConfig,
    QueueItem,
    QueueStats,
    enqueue_ai_request,
    get_ai_queue,
    get_queue_stats,
    reset_ai_queue,
)

__all__ = [
    "AIRequestQueue",
    "Priority",
    "QueueConfig",
    "QueueItem",
    "QueueStats",
    "enqueue_ai_request",
    "get_ai_queue",
    "get_queue_stats",
    "reset_ai_queue",
]
