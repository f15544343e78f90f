"""
Centralized Prometheus metrics definitions for the Opening Trainer.

This module uses the prometheus-client library to define the counters the
trainer updates while building its catalog and running sessions. Grouping them
here provides a single overview of the application's instrumentation points.
"""
from prometheus_client import Counter

# A common prefix for all application-specific metrics.
PREFIX = "opening_trainer"

# --- Catalog Metrics ---

RECORDS_PARSED_TOTAL = Counter(
    f"{PREFIX}_records_parsed_total",
    "Total number of PGN records turned into a variation.",
)

RECORDS_DROPPED_TOTAL = Counter(
    f"{PREFIX}_records_dropped_total",
    "Total number of PGN records dropped for lacking a name or usable movetext.",
)

CATALOG_SOURCE_FAILURES_TOTAL = Counter(
    f"{PREFIX}_catalog_source_failures_total",
    "Total number of opening sources that could not be read.",
    ["opening"],
)

# --- Session Metrics ---

PLAYBACKS_TOTAL = Counter(
    f"{PREFIX}_playbacks_total",
    "Total number of guided playbacks, by outcome.",
    ["outcome"],  # e.g., outcome="Completed", "Cancelled"
)

TEST_MOVES_TOTAL = Counter(
    f"{PREFIX}_test_moves_total",
    "Total number of learner moves judged in test mode, by verdict.",
    ["verdict"],  # e.g., verdict="Accepted", "Mismatch"
)
