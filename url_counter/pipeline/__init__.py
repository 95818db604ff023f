"""url_counter.pipeline: bounded-concurrency fetch-and-count pipeline."""

from url_counter.pipeline.counter import count_occurrences
from url_counter.pipeline.dispatcher import Dispatcher
from url_counter.pipeline.fetcher import Fetcher
from url_counter.pipeline.models import CountSummary, UrlCount
from url_counter.pipeline.sync import AdmissionGate, CompletionBarrier

__all__ = [
    "AdmissionGate",
    "CompletionBarrier",
    "CountSummary",
    "Dispatcher",
    "Fetcher",
    "UrlCount",
    "count_occurrences",
]
