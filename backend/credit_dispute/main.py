"""
Credit Dispute Engine - FastAPI Application

Main entry point for the backend.

Pipeline:
- Upload -> FileValidator -> TextExtractor -> ReportParser -> CreditReportData
- CreditReportData -> IssueDetector -> [IdentifiedIssue] (never fewer than 3)
- [IdentifiedIssue] -> TemplateSelector -> LetterAssembler -> [DisputeLetter]
"""
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .routers import reports_router, letters_router, auth_router
from .database import init_db_with_retry

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database on startup, retrying while it comes up."""
    attempts = init_db_with_retry()
    logger.info(f"Database ready after {attempts} attempt(s)")
    yield

# Create FastAPI app
app = FastAPI(
    lifespan=lifespan,
    title="Credit Dispute Engine",
    description="""
    Credit Dispute Engine - Credit Report Analysis and Dispute Letters

    Upload a credit report (PDF, TXT, CSV or HTML), review the issues found
    in it, and generate FCRA dispute letters for the most important ones.

    ## Pipeline
    1. **Extraction**: validate the upload and pull out its text
    2. **Parsing**: split the text into personal info, accounts, inquiries, public records
    3. **Issue Detection**: keyword and threshold rules tagged with impact and statutes
    4. **Letters**: template selection and assembly with a primary -> manual -> emergency fallback
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router)
app.include_router(reports_router)
app.include_router(letters_router)


@app.get("/")
async def root():
    """Root endpoint - API information."""
    return {
        "name": "Credit Dispute Engine",
        "version": __version__,
        "description": "Credit report issue detection and dispute letter generation",
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


# For running with: python -m credit_dispute.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001)
