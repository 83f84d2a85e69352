"""Built-in tag vocabulary for PlainTasks LSP completion."""

# Tags offered by completion even when the document doesn't use them yet
BUILTIN_TAGS = [
    "today",
    "high",
    "medium",
    "low",
    "critical",
    "done",  # Stamped by "Mark as Done"
    "cancelled",  # Stamped by "Mark as Cancelled"
    "started",
    "est",  # Estimate, e.g. @est(2h)
    "lasted",  # Time actually spent
]
