# Routes package init
"""
DualStore — API Routes Package
================================

Route Inventory:
    - health.py:     GET    /api/healthchecker     (liveness)
                     GET    /health                (readiness: both stores)
    - customers.py:  POST   /api/pg                (create customer)
                     GET    /api/pg                (list customers, page/limit)
                     GET    /api/pg/{id}           (get customer)
                     PATCH  /api/pg/{id}           (update customer)
                     DELETE /api/pg/{id}           (delete customer)
    - orders.py:     POST   /api/mongo             (create order)
                     GET    /api/mongo             (list orders, page/limit)
                     GET    /api/mongo/{id}        (get order)
                     PATCH  /api/mongo/{id}        (update order)
                     DELETE /api/mongo/{id}        (delete order)

Routes stay thin: extract path/body/query, call the service, return its model.
"""
