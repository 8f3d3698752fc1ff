"""auth/ -- Credential and token core for CredGate.

Layer rule: auth/ imports only stdlib + third-party libraries.
It does NOT import from api/ or core/. Configuration arrives through
constructor arguments; service_from_settings() in api/main.py does the wiring.
api/ imports from auth/, not the other way around.
"""
