"""tasks/ -- Task domain: models, validation, listing queries and persistence.

Layer rule: tasks/ imports only core/. Authorization happens in api/ via auth/.
"""
