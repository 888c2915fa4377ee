#!/usr/bin/env python3
"""
Kii Authentication Server - FastAPI Edition

A small local FastAPI server that obtains Kii Cloud access tokens, either as
an anonymous user or as a KiiUser, and keeps them in short-lived sessions so
other local tooling can pick them up.
"""

import logging
import os
import uuid
from typing import Optional, Dict, Any
from datetime import datetime, timedelta

import uvicorn
from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel

from kii_core import App, KiiClient, KiiError, KiiRemoteError
from kii_things import APIAuthor
from kii_things.schemas import KiiUserLoginRequest

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

SESSION_TTL = timedelta(hours=1)

# FastAPI app
app = FastAPI(
    title="Kii Authentication Server",
    description="Obtains Kii Cloud access tokens for local tooling",
    version="0.1.0"
)

# In-memory session storage
sessions: Dict[str, Dict[str, Any]] = {}

def cleanup_sessions():
    """Remove expired sessions."""
    current_time = datetime.now()
    expired_sessions = [
        session_id for session_id, session_data in sessions.items()
        if current_time - session_data.get('created_at', current_time) > SESSION_TTL
    ]
    for session_id in expired_sessions:
        del sessions[session_id]
        logger.info(f"Removed expired session: {session_id}")

def get_kii_app() -> App:
    """Read the Kii application from the environment."""
    try:
        return App(
            app_id=os.environ["KII_APP_ID"],
            app_key=os.environ["KII_APP_KEY"],
            app_location=os.environ["KII_APP_LOCATION"],
        )
    except KeyError as e:
        raise HTTPException(status_code=500, detail=f"Missing configuration: {e.args[0]}")

# Pydantic models
class LoginRequest(BaseModel):
    username: str
    password: str

class AuthStartResponse(BaseModel):
    session_id: str
    step: str
    user_id: Optional[str] = None
    error: Optional[str] = None

class AuthStatusResponse(BaseModel):
    session_id: str
    step: str
    user_id: Optional[str] = None
    access_token: Optional[str] = None
    error: Optional[str] = None

def start_session(kii_app: App, login) -> AuthStartResponse:
    """Create a session and run the given login against a fresh author."""
    cleanup_sessions()

    session_id = str(uuid.uuid4())
    logger.info(f"Starting new authentication session: {session_id}")

    author = APIAuthor(kii_app, client=KiiClient())
    sessions[session_id] = {
        'step': 'processing',
        'author': author,
        'error_message': None,
        'created_at': datetime.now(),
    }

    try:
        login(author)
    except KiiRemoteError as e:
        logger.warning(f"Login rejected for session {session_id}: {e}")
        sessions[session_id]['step'] = 'error'
        sessions[session_id]['error_message'] = str(e)
        return AuthStartResponse(session_id=session_id, step='error', error=str(e))
    except KiiError as e:
        logger.error(f"Error during login for session {session_id}: {e}")
        del sessions[session_id]
        raise HTTPException(status_code=502, detail=str(e))

    sessions[session_id]['step'] = 'success'
    logger.info(f"Authentication successful for session: {session_id}")
    return AuthStartResponse(session_id=session_id, step='success', user_id=author.id)

# API Routes
@app.post("/start/anonymous", response_model=AuthStartResponse)
async def start_anonymous(kii_app: App = Depends(get_kii_app)):
    """Start a session authenticated as an anonymous user."""
    return start_session(kii_app, lambda author: author.anonymous_login())

@app.post("/start/login", response_model=AuthStartResponse)
async def start_login(request: LoginRequest, kii_app: App = Depends(get_kii_app)):
    """Start a session authenticated as a KiiUser."""
    login_request = KiiUserLoginRequest(username=request.username, password=request.password)
    return start_session(kii_app, lambda author: author.login_as_kii_user(login_request))

@app.get("/status/{session_id}", response_model=AuthStatusResponse)
async def get_auth_status(session_id: str):
    """Get the current status of an authentication session."""
    cleanup_sessions()
    if session_id not in sessions:
        raise HTTPException(status_code=404, detail="Session not found")

    session = sessions[session_id]
    author: APIAuthor = session['author']
    succeeded = session['step'] == 'success'

    return AuthStatusResponse(
        session_id=session_id,
        step=session['step'],
        user_id=author.id if succeeded else None,
        access_token=author.token if succeeded else None,
        error=session.get('error_message')
    )

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "active_sessions": len(sessions)}

def main():
    """Run the FastAPI authentication server."""
    port = int(os.environ.get("KII_AUTH_PORT", "8000"))
    logger.info("Kii Authentication Server (FastAPI)")
    logger.info(f"Starting server at http://localhost:{port}")

    uvicorn.run(
        "kii_auth.auth_server:app",
        host="127.0.0.1",
        port=port,
        log_level="info",
        reload=False
    )

if __name__ == "__main__":
    main()
