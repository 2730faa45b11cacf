"""
Folio Backend — API Routes Package
====================================

Route Inventory:
    - auth.py:      /api/auth/register, login, me, logout, password
    - projects.py:  /api/projects (public reads, authenticated writes, uploads)
    - contact.py:   /api/contact  (public submit, staff management)
    - health.py:    /health

Routes stay thin: parse the request, call a service from the AppContext,
wrap the result in a response envelope. Errors are raised, never formatted
here.
"""
