# Services package init
"""
Wildwood Zoo Backend — Services Layer
=======================================

What:  Business logic between routes (HTTP) and the database.
How:   One stateless service class per resource with a module-level
       singleton. Each method receives the request's AsyncSession.

Service Inventory:
    - AuthService:          registration, login, current user
    - TicketService:        purchase transaction, history, use, revenue
    - ShopService:          gift-shop sales (transactional) and history
    - ProductService / InventoryService: catalog and per-shop stock
    - AnimalService / EnclosureService:  animals, enclosures, report
    - StaffService / VisitorService:     people
    - ObservationService / NotificationService
    - AttractionService:    attractions and staff assignments
"""
