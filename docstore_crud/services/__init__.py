# Services package init
"""
DocStore CRUD — Services Layer
===============================

What:  Store logic sitting between routes (HTTP) and MongoDB (persistence).
How:   Services accept decoded request models, perform one store operation,
       and return response models or raise application exceptions.

Service Inventory:
    - DocumentService: insert / find-all / find-one-and-update /
      find-one-and-delete over one collection, for any Resource
"""
