"""
ConfSwipe – conference event browser.

Swipe through conference events, mark the ones you care about, and get a
per-day agenda that flags overlapping sessions.
"""
