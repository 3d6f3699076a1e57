"""
Travel packages backend package root.

Session-based signup/login and a read-only catalog of nested travel packages,
served with FastAPI. Build the app with `travel_packages.api.main.create_app`.
"""
