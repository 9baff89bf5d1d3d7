from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from compensation.core.config import settings
from compensation.core.logging import configure_logging
from compensation.routers import documents, ledgers

configure_logging()

OPENAPI_TAGS = [
    {
        "name": "Documents",
        "description": "Create debtors, invoices, credit and debit notes and payment documents.",
    },
    {
        "name": "Ledgers",
        "description": (
            "Confirm and cancel invoices and apply credit and debit notes "
            "against a debtor's outstanding invoices."
        ),
    },
]

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "Credit and debit note compensation for the sales and purchase ledgers: "
        "outstanding balances, allocation of notes to open invoices and reversal."
    ),
    debug=settings.DEBUG,
    openapi_tags=OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(documents.router, prefix="/v1/{side}", tags=["Documents"])
app.include_router(ledgers.router, prefix="/v1/{side}", tags=["Ledgers"])


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "status": "running",
    }
