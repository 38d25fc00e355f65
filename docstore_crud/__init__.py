"""
DocStore CRUD — Application Package Initializer
================================================

What: Marks the `docstore_crud` directory as a Python package.
Who:  Used by uvicorn (`docstore_crud.main:app`), pytest, and `python -m docstore_crud`.

Architecture Note:
    The service follows the same layered shape for every resource:

    ┌─────────────────────────────────────┐
    │      Routes (generic CRUD router)   │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │    Services (DocumentService)       │  ← Store calls, error translation
    ├─────────────────────────────────────┤
    │   Resources & Schemas (Pydantic)    │  ← Entity shapes, collection binding
    ├─────────────────────────────────────┤
    │     Database (AsyncMongoClient)     │  ← One shared client per process
    └─────────────────────────────────────┘

    Users and employees are two Resource descriptors fed through the same
    router factory; adding a third resource means adding a schema pair and
    a registry entry.
"""

__version__ = "1.0.0"
