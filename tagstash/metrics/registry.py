"""Prometheus metrics registry and metric objects used across the app."""

from __future__ import annotations

from prometheus_client import Counter, Histogram, REGISTRY


ARCHIVED_FILES = Counter(
    "tagstash_archived_files_total", "Total number of files written to the archive"
)

ARCHIVED_BYTES = Counter(
    "tagstash_archived_bytes_total", "Total bytes written to the archive"
)

SKIPPED_ITEMS = Counter(
    "tagstash_skipped_items_total", "Media messages skipped for lacking a file"
)

REJECTED_MESSAGES = Counter(
    "tagstash_rejected_messages_total", "Messages from senders outside the allow-list"
)

FAILED_MESSAGES = Counter(
    "tagstash_failed_messages_total", "Messages whose handling raised an error"
)

PROCESSING_SECONDS = Histogram(
    "tagstash_processing_seconds", "Download and write time per archived file"
)
