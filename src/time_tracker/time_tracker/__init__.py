"""Time Tracker package.

Feature modules (users, teams, time_entries, approvals, reporting, ...) keep a
thin Flask controller layer on top of service and repository layers.
"""
