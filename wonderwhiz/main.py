from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from wonderwhiz.config import settings
from wonderwhiz.services.chat_session import chat_session_manager
import logging

from wonderwhiz.api import chat as chat_api, websocket as websocket_api

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

app = FastAPI(
    title="WonderWhiz Tutor API",
    description="Conversational tutoring for curious kids: topics, sections, quizzes and pictures",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(chat_api.router)
app.include_router(websocket_api.router)

@app.get("/")
async def root():
    return {
        "message": "WonderWhiz Tutor API",
        "features": [
            "New topic detection with generated table of contents",
            "Section progress tracking",
            "Related topic suggestions",
            "Fun facts, stories, pictures and quizzes"
        ]
    }

@app.get("/health")
async def health_check():
    return {"status": "healthy", "active_sessions": len(chat_session_manager.sessions)}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
