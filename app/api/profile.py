"""
ZAP Confeitaria - Profile API
Dados da confeitaria e logo usados nos orçamentos
"""
import uuid
from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging

from app.database import get_db
from app.models import Profile, User
from app.schemas import ProfileUpdate, ProfileResponse
from app.api.auth import get_current_user
from app.utils.uploads import save_upload, remove_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["Profile"])

MAX_LOGO_SIZE = 2 * 1024 * 1024


async def get_or_create_profile(db: AsyncSession, user: User) -> Profile:
    result = await db.execute(select(Profile).where(Profile.user_id == user.id))
    profile = result.scalar_one_or_none()

    if not profile:
        profile = Profile(user_id=user.id)
        db.add(profile)
        await db.flush()
        await db.refresh(profile)

    return profile


@router.get("", response_model=ProfileResponse)
async def get_profile(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Retorna o perfil da confeitaria"""
    profile = await get_or_create_profile(db, user)
    return profile.to_dict()


@router.put("", response_model=ProfileResponse)
async def update_profile(
    request: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Atualiza o perfil"""
    profile = await get_or_create_profile(db, user)

    update_data = request.model_dump(exclude_unset=True)
    if update_data.get("hidden_kanban_columns") is not None:
        update_data["hidden_kanban_columns"] = [s.value for s in request.hidden_kanban_columns]

    for field, value in update_data.items():
        setattr(profile, field, value)

    await db.commit()
    await db.refresh(profile)

    return profile.to_dict()


@router.post("/logo", response_model=ProfileResponse)
async def upload_logo(
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Faz upload do logo da confeitaria"""
    if not file.content_type or not file.content_type.startswith('image/'):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Arquivo deve ser uma imagem")

    contents = await file.read()
    if len(contents) > MAX_LOGO_SIZE:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Imagem deve ter no máximo 2MB")

    profile = await get_or_create_profile(db, user)

    # Gera nome único para o arquivo
    filename_in = file.filename or ""
    ext = filename_in.rsplit('.', 1)[-1].lower() if '.' in filename_in else 'png'
    filename = f"logo_{user.id}_{uuid.uuid4().hex[:8]}.{ext}"

    old_logo = profile.logo_url
    profile.logo_url = save_upload("logos", filename, contents)
    remove_upload(old_logo, user.id)

    await db.commit()
    await db.refresh(profile)

    logger.info(f"Logo atualizado: {user.email}")
    return profile.to_dict()


@router.delete("/logo", response_model=ProfileResponse)
async def delete_logo(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Remove o logo"""
    profile = await get_or_create_profile(db, user)

    remove_upload(profile.logo_url, user.id)
    profile.logo_url = None

    await db.commit()
    await db.refresh(profile)

    return profile.to_dict()
