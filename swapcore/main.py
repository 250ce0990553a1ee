from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import health, quotes
from .config import settings
from .logging_config import setup_logging
from .middleware import RequestLoggingMiddleware

setup_logging()

# Create FastAPI app
app = FastAPI(
    title="Swapcore Quote API",
    description="Multi-chain swap quote routing across aggregators and on-chain AMM pools",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(quotes.router, tags=["Quotes"])


@app.get("/")
async def root():
    """Root endpoint with basic info"""
    return {
        "name": "Swapcore Quote API",
        "version": "0.1.0",
        "quote": "/v1/quote",
        "docs": "/docs",
        "health": "/healthz"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "swapcore.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )
