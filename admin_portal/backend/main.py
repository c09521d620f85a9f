from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .database import db
from .routers import weather, scenes


app = FastAPI(
    title="Almanac Admin API",
    description="Read-only admin backend for world weather, climate zones and scene lighting",
    version="1.0.0"
)

# CORS middleware for the admin frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Database lifecycle
@app.on_event("startup")
async def startup():
    await db.connect()

@app.on_event("shutdown")
async def shutdown():
    await db.disconnect()

# Health check
@app.get("/")
async def root():
    return {
        "status": "online",
        "service": "Almanac Admin API",
        "version": "1.0.0"
    }

# Include routers
app.include_router(weather.router)
app.include_router(scenes.router)
