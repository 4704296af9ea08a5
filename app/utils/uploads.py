"""
ZAP Confeitaria - Uploads
Arquivos servidos em /uploads (logos e orçamentos em PDF)
"""
import os
from typing import Optional

from app.core.config import settings

PUBLIC_PREFIX = "/uploads/"


def get_uploads_dir() -> str:
    """Diretório de uploads (produção vs local)"""
    if settings.UPLOADS_DIR:
        return settings.UPLOADS_DIR
    if os.path.exists("/app/uploads"):
        return "/app/uploads"
    # Desenvolvimento local - pasta uploads na raiz do projeto
    return os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))), "uploads")


def save_upload(subdir: str, filename: str, contents: bytes) -> str:
    """Grava o arquivo e retorna a URL pública (/uploads/subdir/arquivo)"""
    upload_dir = os.path.join(get_uploads_dir(), subdir)
    os.makedirs(upload_dir, exist_ok=True)

    with open(os.path.join(upload_dir, filename), 'wb') as f:
        f.write(contents)

    return f"{PUBLIC_PREFIX}{subdir}/{filename}"


def local_path(public_url: Optional[str]) -> Optional[str]:
    """Caminho no disco de uma URL /uploads/...; None para URLs externas"""
    if not public_url or not public_url.startswith(PUBLIC_PREFIX):
        return None
    relative = public_url[len(PUBLIC_PREFIX):]
    base = os.path.realpath(get_uploads_dir())
    path = os.path.realpath(os.path.join(base, relative))
    # Não sai do diretório de uploads
    if not path.startswith(base + os.sep):
        return None
    return path


def owned_path(public_url: Optional[str], user_id: str) -> Optional[str]:
    """Caminho no disco só para arquivos da própria conta (logo ou orçamentos)"""
    path = local_path(public_url)
    if not path:
        return None
    relative = os.path.relpath(path, os.path.realpath(get_uploads_dir()))
    owned_prefixes = (
        os.path.join("logos", f"logo_{user_id}_"),
        os.path.join("quote-pdfs", user_id) + os.sep,
    )
    if not relative.startswith(owned_prefixes):
        return None
    return path


def remove_upload(public_url: Optional[str], user_id: str) -> bool:
    path = owned_path(public_url, user_id)
    if path and os.path.exists(path):
        os.remove(path)
        return True
    return False
