"""FastAPI backend for MBS billing code rule checks."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from catalog import get_catalog_provider
from config import CORS_ORIGINS, RULES_RATE_LIMIT
from routes import rules_router
from rules import evaluate_candidates, validate_selection
from schemas import (
    EvaluateRulesRequest,
    EvaluationResultResponse,
    SelectionValidationResponse,
    ValidateSelectionRequest,
)

# Configure logging
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize resources on startup."""
    # Pre-load the rule catalog so the first validation request does no I/O
    provider = get_catalog_provider()
    logger.info(f"MBS rule catalog ready with {len(provider):,} entries")
    yield


app = FastAPI(
    title="MBS Rules Service",
    description="Compliance checks for MBS billing code candidates and selections",
    version="0.1.0",
    lifespan=lifespan,
)

# Rate limiting configuration
limiter = Limiter(key_func=get_remote_address)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register API routers
app.include_router(rules_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "catalog_items": len(get_catalog_provider()),
    }


# ============================================================
# Rule Endpoints (Rate-Limited)
# Catalog lookup endpoints are in routes/rules.py
# ============================================================


@app.post("/api/rules/evaluate", response_model=list[EvaluationResultResponse])
@limiter.limit(RULES_RATE_LIMIT)
async def evaluate_rules(request: Request, evaluate_request: EvaluateRulesRequest):
    """Evaluate a batch of candidate codes against duration, context and exclusivity rules.

    Only candidates in this batch count as selected; no session state is merged in.
    """
    candidates = [c.to_candidate() for c in evaluate_request.candidates]
    results = evaluate_candidates(candidates)
    return [result.to_dict() for result in results]


@app.post("/api/rules/validate-selection", response_model=SelectionValidationResponse)
@limiter.limit(RULES_RATE_LIMIT)
async def validate_selection_endpoint(request: Request, selection_request: ValidateSelectionRequest):
    """Check the clinician's selected codes for catalog-backed mutual exclusivity conflicts."""
    result = validate_selection(
        selection_request.selected_codes,
        **selection_request.context_fields(),
    )
    return result.to_dict()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8080)
