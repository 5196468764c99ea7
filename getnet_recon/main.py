"""Getnet Settlement Decoder - Main Application."""

from fastapi import FastAPI

from getnet_recon.api.routes import settlement
from getnet_recon.core.config import settings
from getnet_recon.core.database import init_db
from getnet_recon.core.logging import setup_logging

# Configure logging before anything else
logger = setup_logging(settings.log_level)

# Create all tables on startup
logger.info("Creating database tables...")
init_db()
logger.info("Database tables ready")

# -- OpenAPI tag metadata for Swagger grouping --
tags_metadata = [
    {
        "name": "Health",
        "description": "Service health and readiness checks.",
    },
    {
        "name": "Settlement",
        "description": (
            "Decode Getnet positional settlement files, split them per "
            "establishment, correct MAN gross values and list parsed files."
        ),
    },
]


app = FastAPI(
    title="Getnet Settlement Decoder",
    description=(
        "## Card Acquirer Settlement Decoding API\n\n"
        "This service decodes the daily fixed-width settlement file of the "
        "Getnet acquirer (layout V10.1) into structured records for the "
        "accounting pipeline.\n\n"
        "### Record Types\n"
        "| Tag | Record |\n"
        "|-----|--------|\n"
        "| **0** | Header |\n"
        "| **1** | Sales summary (RV) |\n"
        "| **2** | Sales voucher |\n"
        "| **3** | Financial adjustment |\n"
        "| **4** | Anticipation |\n"
        "| **5** | Receivables negotiation |\n"
        "| **6** | Receivable unit |\n"
        "| **9** | Trailer |\n\n"
        "### MAN gross correction\n"
        "Sales reported under the `MAN` capture channel with no fee carry the "
        "net value as gross.  They are paired with the terminal record that "
        "settles the same net value on the same date, and the pair collapses "
        "into one record with the true gross and fee.\n\n"
        "### Quick Start\n"
        "```bash\n"
        "curl -X POST '/api/v1/settlement/parse' -F file=@getnetextr_20260220.txt\n"
        "```\n"
    ),
    version="1.0.0",
    openapi_tags=tags_metadata,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.include_router(settlement.router, prefix="/api/v1/settlement", tags=["Settlement"])

logger.info("Getnet Settlement Decoder API ready - routes registered")


@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint.

    Returns a simple JSON object confirming the service is running.
    """
    return {"status": "healthy", "service": "getnet-recon"}
