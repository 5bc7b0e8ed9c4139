"""Serves files kept by the local storage backend."""

import mimetypes

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse

from lms.services.storage import FileStorage, get_file_storage

router = APIRouter()


@router.get("/{file_path:path}")
def serve_file(file_path: str, storage: FileStorage = Depends(get_file_storage)):
    """Stream a stored file; audio and video play inline, the rest downloads."""
    path = storage.resolve(file_path)
    if path is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")

    media_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    if media_type.startswith(("video/", "audio/")):
        headers = {
            "Content-Disposition": f'inline; filename="{path.name}"',
            "Accept-Ranges": "bytes",
        }
    else:
        headers = {"Content-Disposition": f'attachment; filename="{path.name}"'}
    return FileResponse(path, media_type=media_type, headers=headers)
