"""Services behind translatable records.

Modules here are imported directly (``translatable.services.translator``) to
keep the model and service packages free of import cycles.
"""
