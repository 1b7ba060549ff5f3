"""Queue worker entry point."""

from sharepoint_indexer.worker.queue_handler import QueueHandler, parse_queue_item

__all__ = ["QueueHandler", "parse_queue_item"]
