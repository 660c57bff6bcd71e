"""
Infrastructure collaborators: HTTP fetcher and snapshot store.
"""
