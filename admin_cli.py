"""
ZAP Confeitaria - CLI Admin
Ferramenta de linha de comando para administrar a plataforma

Uso:
    python admin_cli.py promote email@confeitaria.com
    python admin_cli.py demote email@confeitaria.com
    python admin_cli.py login
    python admin_cli.py users list
"""
import sys
import asyncio
import httpx
from pathlib import Path

from sqlalchemy import select

from app.database import AsyncSessionLocal, init_db
from app.models import User

BASE_URL = "http://localhost:8080"
TOKEN_FILE = Path(".admin_token")


def save_token(token: str):
    TOKEN_FILE.write_text(token)


def load_token() -> str:
    if TOKEN_FILE.exists():
        return TOKEN_FILE.read_text().strip()
    return None


def get_headers():
    token = load_token()
    if not token:
        print("Erro: Faça login primeiro com 'python admin_cli.py login'")
        sys.exit(1)
    return {"Authorization": f"Bearer {token}"}


async def set_admin(email: str, is_admin: bool, session_factory=AsyncSessionLocal) -> bool:
    """Liga/desliga o papel de administrador direto no banco"""
    async with session_factory() as session:
        result = await session.execute(select(User).where(User.email == email.lower()))
        user = result.scalar_one_or_none()
        if not user:
            return False

        user.is_admin = is_admin
        await session.commit()
        return True


def cmd_set_admin(email: str, is_admin: bool):
    async def run():
        await init_db()
        return await set_admin(email, is_admin)

    if asyncio.run(run()):
        print(f"✓ {email} {'agora é' if is_admin else 'não é mais'} administrador")
    else:
        print(f"✗ Usuário não encontrado: {email}")


def cmd_login():
    """Login no sistema"""
    email = input("Email: ").strip()
    password = input("Senha: ").strip()

    try:
        response = httpx.post(
            f"{BASE_URL}/api/auth/login",
            json={"email": email, "password": password}
        )
    except httpx.HTTPError as e:
        print(f"✗ Erro de conexão: {e}")
        return

    if response.status_code == 200:
        data = response.json()
        save_token(data["access_token"])
        print("\n✓ Login bem sucedido!")
        print(f"  Usuário: {data['user']['email']}")
    else:
        print(f"✗ Erro: {response.json().get('detail', 'Falha no login')}")


def cmd_users_list():
    """Lista as contas (requer login de administrador)"""
    try:
        response = httpx.get(f"{BASE_URL}/api/admin/users", headers=get_headers())
    except httpx.HTTPError as e:
        print(f"✗ Erro: {e}")
        return

    if response.status_code != 200:
        print(f"✗ Erro: {response.text}")
        return

    users = response.json()["users"]
    print(f"\n{'='*80}")
    print(f"{'Email':<32} | {'Empresa':<24} | {'Assinatura':<12}")
    print(f"{'='*80}")
    for u in users:
        company = (u['company_name'] or '-')[:24]
        print(f"{u['email'][:32]:<32} | {company:<24} | {u['subscription_status']:<12}")
    print(f"\nTotal: {len(users)} contas")


def main():
    args = sys.argv[1:]

    if not args:
        print(__doc__)
        return

    if args[0] == "login":
        cmd_login()
    elif args[0] == "users" and args[1:] == ["list"]:
        cmd_users_list()
    elif args[0] in ("promote", "demote") and len(args) == 2:
        cmd_set_admin(args[1], args[0] == "promote")
    else:
        print(__doc__)


if __name__ == "__main__":
    main()
