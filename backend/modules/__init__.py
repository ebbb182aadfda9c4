"""
Feature modules for the RentHub backend.

Each module is self-contained with its own:
- interfaces.py: Protocol definitions for the module's public API
- models.py: Pydantic models for data transfer
- exceptions.py: Module-specific exceptions
- service/repository code implementing the interfaces
- routes.py: FastAPI route handlers, where the module serves HTTP

Modules communicate through interfaces, not concrete implementations.
"""
