"""
Per-domain repository modules for database access.

``records`` holds the generic store operations over the table registry; the
domain modules add the multi-step writes (post likes, cart items, chat
lifecycle) on top of it.
"""
