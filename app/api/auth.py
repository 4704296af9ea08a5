"""
ZAP Confeitaria - Auth API
Cadastro, login e redefinição de senha das contas
"""
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from slowapi import Limiter
from slowapi.util import get_remote_address
import logging

from app.database import get_db
from app.models import User, Profile
from app.schemas import (
    RegisterRequest,
    LoginRequest,
    LoginResponse,
    UserResponse,
    PasswordResetRequest,
    PasswordResetConfirm
)
from app.core import (
    verify_password,
    get_password_hash,
    create_access_token,
    verify_access_token,
    generate_password_reset_token,
    hash_reset_token,
    settings
)
from app.core.email import email_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])
security = HTTPBearer()

# Rate limiter (registrado em app.state no main)
limiter = Limiter(key_func=get_remote_address)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Dependency para obter o usuário autenticado"""
    token = credentials.credentials
    payload = verify_access_token(token)

    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token inválido ou expirado"
        )

    result = await db.execute(
        select(User).where(User.id == payload.get("sub"))
    )
    user = result.scalar_one_or_none()

    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Usuário não encontrado ou inativo"
        )

    return user


async def require_subscription(user: User = Depends(get_current_user)) -> User:
    """
    Dependency das rotas de negócio.
    Com SUBSCRIPTION_REQUIRED ligado, exige assinatura ativa (admins passam direto).
    """
    if not settings.SUBSCRIPTION_REQUIRED or user.is_admin:
        return user

    if user.subscription is None or not user.subscription.is_active:
        raise HTTPException(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail={
                "message": "Assinatura necessária para acessar este recurso",
                "pricing_url": settings.PRICING_URL
            }
        )

    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Acesso restrito a administradores"
        )
    return user


def _login_response(user: User) -> LoginResponse:
    access_token = create_access_token(data={"sub": user.id, "email": user.email})
    return LoginResponse(
        access_token=access_token,
        token_type="bearer",
        user=user.to_dict()
    )


@router.post("/register", response_model=LoginResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Cria a conta e o perfil da confeitaria"""
    email = request.email.lower()

    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email já cadastrado"
        )

    user = User(
        email=email,
        hashed_password=get_password_hash(request.password),
        full_name=request.full_name
    )
    db.add(user)
    await db.flush()

    db.add(Profile(user_id=user.id, company_name=request.company_name))
    await db.flush()

    logger.info(f"Nova conta criada: {email}")

    email_service.send_welcome_email(email, request.full_name or email)

    return _login_response(user)


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """Login com email e senha"""
    result = await db.execute(
        select(User).where(User.email == credentials.email.lower())
    )
    user = result.scalar_one_or_none()

    if not user or not verify_password(credentials.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Email ou senha inválidos"
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Conta desativada"
        )

    # Atualiza último login
    user.last_login_at = datetime.utcnow()
    await db.flush()

    return _login_response(user)


@router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(get_current_user)):
    """Retorna dados do usuário atual"""
    return user.to_dict()


@router.post("/password-reset/request")
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def request_password_reset(
    request: Request,
    data: PasswordResetRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Envia link de redefinição de senha por email.
    Sempre responde 200 para não revelar quais emails estão cadastrados.
    """
    result = await db.execute(
        select(User).where(User.email == data.email.lower())
    )
    user = result.scalar_one_or_none()

    if user and user.is_active:
        token, token_hash, expires_at = generate_password_reset_token()
        user.reset_token_hash = token_hash
        user.reset_token_expires_at = expires_at
        await db.flush()

        reset_link = f"{settings.PASSWORD_RESET_URL}?token={token}"
        if not email_service.send_password_reset_email(user.email, user.full_name or user.email, reset_link):
            logger.warning(f"Email de redefinição não enviado para {user.email}")
    else:
        logger.info(f"Redefinição de senha solicitada para email desconhecido: {data.email}")

    return {"message": "Se o email estiver cadastrado, você receberá um link para redefinir a senha"}


@router.post("/password-reset/confirm")
async def confirm_password_reset(data: PasswordResetConfirm, db: AsyncSession = Depends(get_db)):
    """Define a nova senha a partir do token recebido por email"""
    result = await db.execute(
        select(User).where(User.reset_token_hash == hash_reset_token(data.token))
    )
    user = result.scalar_one_or_none()

    if (
        not user
        or not user.reset_token_expires_at
        or user.reset_token_expires_at < datetime.utcnow()
    ):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Link de redefinição inválido ou expirado"
        )

    user.hashed_password = get_password_hash(data.new_password)
    user.reset_token_hash = None
    user.reset_token_expires_at = None
    await db.flush()

    logger.info(f"Senha redefinida: {user.email}")

    return {"message": "Senha redefinida com sucesso"}
