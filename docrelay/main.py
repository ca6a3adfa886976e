from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docrelay.api import auth_check, credentials, detect_file, edit_doc
from docrelay.config import VERSION, get_settings
from docrelay.dependencies import get_credentials_repo, get_detector

app = FastAPI(title="Document Automation Relay", version=VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(edit_doc.router, prefix="/edit-doc", tags=["edit"])
app.include_router(detect_file.router, prefix="/detect-file", tags=["detect"])
app.include_router(credentials.router, prefix="/credentials", tags=["credentials"])
app.include_router(auth_check.router, prefix="/test-auth", tags=["auth"])


@app.get("/health")
async def health():
    settings = get_settings()
    repo = get_credentials_repo()
    authentication = {}
    for platform in get_detector().platforms:
        stored = False
        if settings.default_user_id:
            try:
                stored = repo.exists(settings.default_user_id, platform.credential_key)
            except ValueError:
                stored = False
        oauth = settings.accept_oauth and platform.credential_key == "google"
        authentication[platform.name] = stored or oauth
    return {
        "status": "ok",
        "version": VERSION,
        "platforms": [p.name for p in get_detector().platforms],
        "authentication": authentication,
    }
