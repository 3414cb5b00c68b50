# Services package init
"""
DualStore — Services Layer
============================

What:  Store adapters sitting between routes (HTTP) and the databases.
Why:   Routes handle HTTP; services own the queries and translate driver
       exceptions into DualStoreError.

Service Inventory:
    - CustomerService: customer table via async SQLAlchemy (PostgreSQL)
    - OrderService:    order collection via async PyMongo (MongoDB)

Both are stateless singletons; the session or collection is passed in per call,
which lets unit tests hand in mocks directly.
"""
