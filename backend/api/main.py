from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import List, Optional
import logging
import re

from api.config import settings
from scrapers.base import InvalidInput
from scrapers.manager import ScraperManager
from pydantic import BaseModel, StrictStr, field_validator

# Setup logging directory
settings.log_dir.mkdir(exist_ok=True)


# Custom formatter to strip ANSI color codes from file logs
class ColorStripFormatter(logging.Formatter):
    """Formatter that strips ANSI color codes from log messages."""
    ansi_escape = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')

    def format(self, record):
        message = super().format(record)
        return self.ansi_escape.sub('', message)

# Setup logging with color support for console, stripped for file
file_handler = logging.FileHandler(settings.log_file, encoding='utf-8')
file_handler.setFormatter(ColorStripFormatter(settings.log_format))

console_handler = logging.StreamHandler()
console_handler.setFormatter(logging.Formatter(settings.log_format))

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    handlers=[file_handler, console_handler],
    force=True  # Override any existing configuration
)

# Scraper loggers get their own handlers so messages appear once
scraper_logger = logging.getLogger('scraper')
scraper_logger.propagate = False
# Only add handlers if not already present (prevents duplicates on module reload)
if not scraper_logger.handlers:
    scraper_file_handler = logging.FileHandler(settings.log_file, encoding='utf-8')
    scraper_file_handler.setFormatter(ColorStripFormatter(settings.log_format))
    scraper_logger.addHandler(scraper_file_handler)

    scraper_console_handler = logging.StreamHandler()
    scraper_console_handler.setFormatter(logging.Formatter(settings.log_format))
    scraper_logger.addHandler(scraper_console_handler)
scraper_logger.setLevel(getattr(logging, settings.log_level.upper()))

logger = logging.getLogger(__name__)

CITY_REQUIRED = "City is required"
SCRAPE_FAILED = "Failed to scrape listings"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info("=" * 60)
    logger.info("Home Search Backend Starting Up")
    logger.info("=" * 60)
    logger.info(f"Log file: {settings.log_file}")
    logger.info(f"Listings file: {settings.listings_file}")
    logger.info(f"CORS origins: {settings.cors_origins}")
    logger.info("Backend ready to accept requests")

    yield  # Application runs here

    logger.info("Home Search Backend Shutting Down")


app = FastAPI(
    title="Home Search API",
    version="1.0.0",
    lifespan=lifespan
)

# Note: allow_credentials must be False when allow_origins is ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Errors are returned as {"error": "..."} rather than FastAPI's {"detail": ...}
@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed scrape requests are client errors (400), not 422."""
    errors = exc.errors()
    if any('city' in err.get('loc', ()) or tuple(err.get('loc', ())) == ('body',) for err in errors):
        message = CITY_REQUIRED
    else:
        message = "Invalid request body"
    logger.debug(f"Rejected request to {request.url.path}: {errors}")
    return JSONResponse(status_code=400, content={"error": message})


# Pydantic models for API requests and responses
class ScrapeRequest(BaseModel):
    city: StrictStr
    headless: Optional[bool] = None

    @field_validator('city')
    @classmethod
    def city_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError(CITY_REQUIRED)
        return value.strip()


class ListingResponse(BaseModel):
    price: Optional[str] = None
    address: Optional[str] = None
    bedrooms: Optional[str] = None
    bathrooms: Optional[str] = None
    sqft: Optional[str] = None


class ScrapeResponse(BaseModel):
    listings: List[ListingResponse]


def get_scraper_manager() -> ScraperManager:
    """Build a manager from settings; each request runs its own session."""
    return ScraperManager(
        output_file=settings.listings_file,
        timeout=settings.scraper_timeout,
        max_pages=settings.scraper_max_pages,
        scroll_delay=settings.scraper_scroll_delay,
    )


# API Endpoints

@app.get("/")
async def root():
    return {"message": "Home Search API", "version": "1.0.0"}


@app.get("/api/scrapers")
async def list_scrapers(manager: ScraperManager = Depends(get_scraper_manager)):
    """List all available scrapers and their implementation status"""
    return {
        "scrapers": manager.list_scrapers(),
        "implemented": manager.get_implemented_scrapers()
    }


@app.post("/scrape", response_model=ScrapeResponse)
async def scrape(request: ScrapeRequest, manager: ScraperManager = Depends(get_scraper_manager)):
    """Scrape listing cards for a city and return them"""
    headless = settings.scraper_headless if request.headless is None else request.headless

    try:
        listings = await manager.scrape_location(request.city, headless=headless)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e) or CITY_REQUIRED)
    except Exception as e:
        logger.exception(f"Scrape failed for {request.city}: {e}")
        raise HTTPException(status_code=500, detail=SCRAPE_FAILED)

    return {"listings": [listing.to_dict() for listing in listings]}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        access_log=True,
        log_config=None,  # Keep the handlers configured above
        timeout_keep_alive=5,
        timeout_graceful_shutdown=5.0,
    )
