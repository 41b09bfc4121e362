"""MBS Rules Backend Package.

This package provides the FastAPI backend for checking MBS billing code
candidates and selections before a clinician finalizes a claim:

- Candidate evaluation (duration, telehealth context, mutual exclusivity)
- Selection-wide mutual exclusivity validation against the rule catalog
- Normalized MBS rule catalog loading

Usage:
    # Development (from project root):
    PYTHONPATH=backend uvicorn app:app --reload --port 8080

Modules:
    app: FastAPI application entry point
    rules: Candidate evaluator and selection validator
    catalog: Normalized MBS rule catalog and providers
    schemas: Request/response models
    routes: Catalog routes
"""

__version__ = "0.1.0"
