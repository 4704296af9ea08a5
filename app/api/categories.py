"""
ZAP Confeitaria - Product Categories API
Categorias do cardápio, ordenação e categorias sugeridas
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func
import logging

from app.database import get_db
from app.models import ProductCategory, Product, User
from app.schemas import CategoryCreate, CategoryUpdate, CategoryResponse, CategoryReorderRequest
from app.api.auth import require_subscription

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories", tags=["Categories"])

SUGGESTED_CATEGORIES = [
    {"name": "Bolos", "emoji": "🎂", "color": "pink"},
    {"name": "Doces", "emoji": "🍬", "color": "amber"},
    {"name": "Salgados", "emoji": "🥟", "color": "orange"},
    {"name": "Bebidas", "emoji": "🥤", "color": "blue"},
    {"name": "Kits/Combos", "emoji": "📦", "color": "purple"},
]


async def _list_categories(db: AsyncSession, user: User) -> List[ProductCategory]:
    result = await db.execute(
        select(ProductCategory)
        .where(ProductCategory.user_id == user.id)
        .order_by(ProductCategory.display_order, ProductCategory.name)
    )
    return result.scalars().all()


async def _get_category(db: AsyncSession, user: User, category_id: str) -> ProductCategory:
    result = await db.execute(
        select(ProductCategory).where(
            ProductCategory.id == category_id,
            ProductCategory.user_id == user.id
        )
    )
    category = result.scalar_one_or_none()

    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Categoria não encontrada"
        )

    return category


@router.get("", response_model=List[CategoryResponse])
async def list_categories(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Lista as categorias na ordem de exibição"""
    return [c.to_dict() for c in await _list_categories(db, user)]


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    request: CategoryCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Cria categoria no fim da lista"""
    result = await db.execute(
        select(func.max(ProductCategory.display_order)).where(ProductCategory.user_id == user.id)
    )
    last_order = result.scalar()

    category = ProductCategory(
        user_id=user.id,
        display_order=0 if last_order is None else last_order + 1,
        **request.model_dump()
    )
    db.add(category)
    await db.commit()
    await db.refresh(category)

    return category.to_dict()


@router.post("/seed-suggested", response_model=List[CategoryResponse])
async def seed_suggested_categories(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Cria as categorias sugeridas que ainda não existem (pelo nome)"""
    existing = await _list_categories(db, user)
    names = {c.name.lower() for c in existing}
    next_order = max((c.display_order or 0 for c in existing), default=-1) + 1

    created = 0
    for suggestion in SUGGESTED_CATEGORIES:
        if suggestion["name"].lower() in names:
            continue
        db.add(ProductCategory(user_id=user.id, display_order=next_order, **suggestion))
        next_order += 1
        created += 1

    await db.commit()
    logger.info(f"{created} categorias sugeridas criadas para {user.email}")

    return [c.to_dict() for c in await _list_categories(db, user)]


@router.put("/reorder", response_model=List[CategoryResponse])
async def reorder_categories(
    request: CategoryReorderRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Define display_order conforme a posição de cada id na lista"""
    categories = {c.id: c for c in await _list_categories(db, user)}

    unknown = [cid for cid in request.category_ids if cid not in categories]
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Categorias inválidas: {', '.join(unknown)}"
        )

    for position, category_id in enumerate(request.category_ids):
        categories[category_id].display_order = position

    await db.commit()

    return [c.to_dict() for c in await _list_categories(db, user)]


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str,
    request: CategoryUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Atualiza categoria"""
    category = await _get_category(db, user, category_id)

    for field, value in request.model_dump(exclude_unset=True).items():
        setattr(category, field, value)

    await db.commit()
    await db.refresh(category)

    return category.to_dict()


@router.delete("/{category_id}")
async def delete_category(
    category_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Remove categoria (produtos ficam sem categoria)"""
    category = await _get_category(db, user, category_id)

    await db.execute(
        update(Product).where(Product.category_id == category.id).values(category_id=None)
    )
    await db.delete(category)
    await db.commit()

    return {"message": "Categoria removida com sucesso"}
