"""
Montage des fichiers statiques.
Expose:
- /static -> tout le répertoire public (css, js)
"""
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from campreg.config import PUBLIC_DIR

def mount_static_files(app: FastAPI) -> None:
    app.mount("/static", StaticFiles(directory=str(PUBLIC_DIR)), name="static")
