"""
Application Modules.

- backend/: API, database, services, configuration
- client/: Client state manager (notes, tags, attachments, dashboard, theme)
"""
