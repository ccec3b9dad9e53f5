"""
REST service.

Components:
- app.py: FastAPI factory, envelope-shaped error handlers, health routes
- routes.py: /api/tasks router
- schemas.py: request bodies and envelope helpers
"""
