"""auth/ -- Accounts, session tokens and request authorization for Taskboard.

Layer rule: auth/ imports only core/, stdlib and third-party libraries.
It does NOT import from api/, tasks/, or client/.
api/ imports from auth/, not the other way around.
"""
