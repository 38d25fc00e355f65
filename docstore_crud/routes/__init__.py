# Routes package init
"""
DocStore CRUD — API Routes Package
===================================

Route Inventory:
    - crud.py:    build_crud_router(resource) → POST/GET /{resource},
                  PUT/DELETE /{resource}/{id}, mounted once per enabled resource
    - health.py:  GET /health (MongoDB ping)

Routes stay thin: they decode the request, call DocumentService, and
return the model. Status mapping for errors lives in main.py.
"""
