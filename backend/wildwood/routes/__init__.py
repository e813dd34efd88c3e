# Routes package init
"""
Wildwood Zoo Backend — API Routes Package
===========================================

What:  HTTP route handlers, one module per resource, all under /api.

Route Inventory:
    - auth.py:          /api/auth          register, register-staff, login, me
    - animals.py:       /api/animals
    - enclosures.py:    /api/enclosures    incl. report and staff assignment
    - staff.py:         /api/staff
    - visitors.py:      /api/visitors
    - tickets.py:       /api/tickets       purchase, history, use, revenue
    - observations.py:  /api/observations, /api/notifications
    - shop.py:          /api/products, /api/inventory, /api/shop
    - attractions.py:   /api/attractions
    - health.py:        /health

Design Principle:
    Routes stay THIN. Access control is declared with Depends(Authorize(...));
    everything else is delegated to a service.
"""
