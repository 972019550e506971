"""FastAPI application hosting the TruthStamp protocol components."""

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables from .env file
load_dotenv()

from ..domain.errors import ProtocolError
from ..infrastructure.settings import ProtocolSettings
from .endpoints import claims, events, experts, health, reviews
from .errors import protocol_error_handler

settings = ProtocolSettings.from_env()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title="TruthStamp API",
    description="Decentralized fact-checking with staked expert review and stake-weighted consensus",
    version="0.1.0",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(ProtocolError, protocol_error_handler)

# Include routers
app.include_router(health.router)
app.include_router(claims.router)
app.include_router(experts.router)
app.include_router(reviews.router)
app.include_router(events.router)

logger.info("🚀 TruthStamp API ready")
