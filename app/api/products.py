"""
ZAP Confeitaria - Products API
CRUD do cardápio
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, or_

from app.database import get_db
from app.models import Product, ProductCategory, OrderItem, User
from app.schemas import ProductCreate, ProductUpdate, ProductResponse
from app.api.auth import require_subscription

router = APIRouter(prefix="/products", tags=["Products"])


async def _get_product(db: AsyncSession, user: User, product_id: str) -> Product:
    result = await db.execute(
        select(Product).where(Product.id == product_id, Product.user_id == user.id)
    )
    product = result.scalar_one_or_none()

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Produto não encontrado"
        )

    return product


async def _check_category(db: AsyncSession, user: User, category_id: Optional[str]):
    if not category_id:
        return
    result = await db.execute(
        select(ProductCategory.id).where(
            ProductCategory.id == category_id,
            ProductCategory.user_id == user.id
        )
    )
    if result.scalar_one_or_none() is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Categoria inválida"
        )


@router.get("", response_model=List[ProductResponse])
async def list_products(
    search: Optional[str] = Query(None),
    category_id: Optional[str] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Lista os produtos (busca por nome ou descrição)"""
    query = select(Product).where(Product.user_id == user.id)

    if search:
        query = query.where(
            or_(
                Product.name.ilike(f"%{search}%"),
                Product.description.ilike(f"%{search}%")
            )
        )

    if category_id:
        query = query.where(Product.category_id == category_id)

    query = query.order_by(Product.name).offset(skip).limit(limit)

    result = await db.execute(query)
    products = result.scalars().all()

    return [p.to_dict() for p in products]


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Retorna um produto específico"""
    product = await _get_product(db, user, product_id)
    return product.to_dict()


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    request: ProductCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Cria novo produto"""
    await _check_category(db, user, request.category_id)

    data = request.model_dump()
    data["unit_type"] = request.unit_type.value
    product = Product(user_id=user.id, **data)
    db.add(product)
    await db.commit()
    await db.refresh(product, attribute_names=["category"])

    return product.to_dict()


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    request: ProductUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Atualiza produto (pedidos existentes mantêm nome e preço gravados)"""
    product = await _get_product(db, user, product_id)

    update_data = request.model_dump(exclude_unset=True)
    if "category_id" in update_data:
        await _check_category(db, user, update_data["category_id"])
    if update_data.get("unit_type") is not None:
        update_data["unit_type"] = update_data["unit_type"].value

    for field, value in update_data.items():
        setattr(product, field, value)

    await db.commit()
    await db.refresh(product, attribute_names=["category"])

    return product.to_dict()


@router.delete("/{product_id}")
async def delete_product(
    product_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Remove produto (itens de pedidos passam a ser avulsos)"""
    product = await _get_product(db, user, product_id)

    await db.execute(
        update(OrderItem).where(OrderItem.product_id == product.id).values(product_id=None)
    )
    await db.delete(product)
    await db.commit()

    return {"message": "Produto removido com sucesso"}
