"""
ZAP Confeitaria - Clients API
CRUD de clientes da confeitaria
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, or_

from app.database import get_db
from app.models import Client, Order, User
from app.schemas import ClientCreate, ClientUpdate, ClientResponse
from app.api.auth import require_subscription

router = APIRouter(prefix="/clients", tags=["Clients"])


async def _get_client(db: AsyncSession, user: User, client_id: str) -> Client:
    result = await db.execute(
        select(Client).where(Client.id == client_id, Client.user_id == user.id)
    )
    client = result.scalar_one_or_none()

    if not client:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Cliente não encontrado"
        )

    return client


@router.get("", response_model=List[ClientResponse])
async def list_clients(
    search: Optional[str] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Lista os clientes (busca por nome, telefone ou email)"""
    query = select(Client).where(Client.user_id == user.id)

    if search:
        query = query.where(
            or_(
                Client.name.ilike(f"%{search}%"),
                Client.phone.ilike(f"%{search}%"),
                Client.email.ilike(f"%{search}%")
            )
        )

    query = query.order_by(Client.name).offset(skip).limit(limit)

    result = await db.execute(query)
    clients = result.scalars().all()

    return [c.to_dict() for c in clients]


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Retorna um cliente específico"""
    client = await _get_client(db, user, client_id)
    return client.to_dict()


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    request: ClientCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Cria novo cliente"""
    client = Client(user_id=user.id, **request.model_dump())
    db.add(client)
    await db.commit()
    await db.refresh(client)

    return client.to_dict()


@router.put("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: str,
    request: ClientUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Atualiza cliente"""
    client = await _get_client(db, user, client_id)

    update_data = request.model_dump(exclude_unset=True)
    if "name" in update_data and not (update_data["name"] or "").strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Nome é obrigatório"
        )

    for field, value in update_data.items():
        setattr(client, field, value.strip() if field == "name" else value)

    await db.commit()
    await db.refresh(client)

    return client.to_dict()


@router.delete("/{client_id}")
async def delete_client(
    client_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_subscription)
):
    """Remove cliente (pedidos ficam sem cliente)"""
    client = await _get_client(db, user, client_id)

    await db.execute(
        update(Order).where(Order.client_id == client.id).values(client_id=None)
    )
    await db.delete(client)
    await db.commit()

    return {"message": "Cliente removido com sucesso"}
