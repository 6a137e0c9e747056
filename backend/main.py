import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from database import is_supabase_configured
from routers import bookings, flash_designs, messages, portfolio, uploads


def configure_logging() -> None:
    """Console logging with timestamps; quiet the HTTP client libraries."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root_logger.setLevel(logging.INFO)
    root_logger.addHandler(handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


configure_logging()

# Initialize
app = FastAPI()

app.include_router(bookings.router)
app.include_router(messages.router)
app.include_router(uploads.router)
app.include_router(portfolio.router)
app.include_router(flash_designs.router)

@app.get("/")
def root():
    return {"status": "ok", "message": "Studio API"}

@app.get("/health")
def health():
    return {"status": "healthy", "supabase_configured": is_supabase_configured()}

origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:8080",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
