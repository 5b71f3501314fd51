"""
Habit tracker core

Tracks recurring habits ("trackers"), records daily completions and derives
statistics:
- recurrence matching (which trackers are due on a day)
- completion ledger (day-granularity completion facts)
- category filter pipeline (date, completion state, search)
- statistics aggregation (completions, ideal days, best streak, completion rate)
"""

__version__ = "0.1.0"
