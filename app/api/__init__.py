"""
API Blueprints Package

All HTTP route handlers for the application, organized by domain.
Each module defines a Flask Blueprint registered in app/__init__.py.

BLUEPRINT REFERENCE:
====================

Back office:
- crm.py             : Clients and suppliers (/api/clients, /api/suppliers)
- catalog.py         : Services and spare parts (/api/services, /api/spare-parts)
- quotes.py          : Quotes, status, conversion into tickets, PDF
- purchase_orders.py : Purchase orders, status, PDF
- tickets.py         : Service tickets, customer submissions, service order PDF
- projects.py        : Projects and their quote/purchase order links
- dashboard.py       : Back-office summary (/api/admin/summary)

Other:
- pages.py           : Page rendering (public site, customer area, /admin)
- auth_routes.py     : Signup, login, profile and users (/api/auth/*)
- responses.py       : Shared JSON/PDF response helpers
"""

# All blueprints are imported and registered in app/__init__.py
# This file serves as documentation only

__all__ = []
