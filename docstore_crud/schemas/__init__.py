# Schemas package init
"""
DocStore CRUD — Pydantic Schemas
=================================

What:  API contracts for every resource plus the shared error/health shapes.

Schema Inventory:
    - user.py:      UserCreate (request body), UserResponse
    - employee.py:  EmployeeCreate (request body), EmployeeResponse
    - common.py:    ErrorResponse, HealthResponse
"""
