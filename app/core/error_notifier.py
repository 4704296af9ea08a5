"""
ZAP Confeitaria - Error Notification System
Envia emails quando erros criticos ocorrem (geração de PDF, webhook de pagamento)
"""
import logging
import traceback
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from datetime import datetime
from typing import Optional
from functools import wraps

from fastapi import HTTPException

from app.core.config import settings

logger = logging.getLogger(__name__)

# Cache para evitar spam de emails (mesmo erro em sequencia)
_error_cache = {}
_CACHE_TTL_SECONDS = 300  # 5 minutos entre emails do mesmo erro

_SENSITIVE_KEYS = ("password", "token", "secret", "signature")


def _get_error_key(error_type: str, error_msg: str) -> str:
    """Gera chave unica para o erro"""
    return f"{error_type}:{error_msg[:100]}"


def _should_send_notification(error_key: str) -> bool:
    """Verifica se deve enviar notificacao (evita spam)"""
    now = datetime.utcnow()

    if error_key in _error_cache:
        last_sent = _error_cache[error_key]
        if (now - last_sent).total_seconds() < _CACHE_TTL_SECONDS:
            return False

    _error_cache[error_key] = now
    return True


def _sanitize(request_data: dict) -> dict:
    return {
        k: '***' if any(s in k.lower() for s in _SENSITIVE_KEYS) else v
        for k, v in request_data.items()
    }


def _field(label: str, value: str, extra_class: str = "") -> str:
    return f"""
                    <div class="field">
                        <div class="field-label">{label}</div>
                        <div class="field-value {extra_class}">{value}</div>
                    </div>
    """


def send_error_notification(
    error_type: str,
    error_message: str,
    error_details: Optional[str] = None,
    user_id: Optional[str] = None,
    user_email: Optional[str] = None,
    endpoint: Optional[str] = None,
    request_data: Optional[dict] = None
) -> bool:
    """
    Envia email de notificacao de erro.

    Args:
        error_type: Tipo do erro (ex: "PDF_ERROR", "WEBHOOK_ERROR")
        error_message: Mensagem resumida do erro
        error_details: Stack trace ou detalhes tecnicos
        user_id: Conta afetada (se aplicavel)
        user_email: Email do usuario (se aplicavel)
        endpoint: Endpoint que gerou o erro
        request_data: Dados da requisicao (sanitizados antes do envio)

    Returns:
        True se o email foi enviado
    """
    if not settings.ERROR_NOTIFICATION_ENABLED:
        return False

    if not settings.SMTP_USER or not settings.SMTP_PASSWORD:
        logger.warning("SMTP nao configurado - notificacao de erro nao enviada")
        return False

    error_key = _get_error_key(error_type, error_message)
    if not _should_send_notification(error_key):
        logger.debug(f"Notificacao de erro suprimida (spam protection): {error_key}")
        return False

    try:
        msg = MIMEMultipart('alternative')
        msg['Subject'] = f"[ZAP CONFEITARIA ERRO] {error_type}: {error_message[:50]}"
        msg['From'] = f"{settings.SMTP_FROM_NAME} <{settings.SMTP_FROM_EMAIL}>"
        msg['To'] = settings.ERROR_NOTIFICATION_EMAIL

        timestamp = datetime.utcnow().strftime("%Y-%m-%d %H:%M:%S UTC")

        html_body = f"""
        <!DOCTYPE html>
        <html>
        <head>
            <style>
                body {{ font-family: Arial, sans-serif; background: #f5f5f5; padding: 20px; }}
                .container {{ max-width: 600px; margin: 0 auto; background: white; border-radius: 8px; overflow: hidden; }}
                .header {{ background: linear-gradient(135deg, #dc2626 0%, #991b1b 100%); color: white; padding: 20px; }}
                .header h1 {{ margin: 0; font-size: 20px; }}
                .content {{ padding: 20px; }}
                .field {{ margin-bottom: 15px; }}
                .field-label {{ font-weight: bold; color: #374151; font-size: 12px; text-transform: uppercase; margin-bottom: 5px; }}
                .field-value {{ background: #f9fafb; padding: 10px; border-radius: 4px; border: 1px solid #e5e7eb; font-family: monospace; font-size: 13px; word-break: break-all; }}
                .error-details {{ background: #fef2f2; border: 1px solid #fecaca; color: #991b1b; }}
                .footer {{ background: #f9fafb; padding: 15px 20px; font-size: 11px; color: #6b7280; border-top: 1px solid #e5e7eb; }}
            </style>
        </head>
        <body>
            <div class="container">
                <div class="header">
                    <h1>&#9888; Erro na ZAP Confeitaria</h1>
                </div>
                <div class="content">
        """
        html_body += _field("Tipo do Erro", error_type)
        html_body += _field("Mensagem", error_message)
        html_body += _field("Data/Hora", timestamp)

        if user_id:
            html_body += _field("Conta", user_id)
        if user_email:
            html_body += _field("Usuario", user_email)
        if endpoint:
            html_body += _field("Endpoint", endpoint)
        if request_data:
            html_body += _field("Dados da Requisicao", f"<pre>{str(_sanitize(request_data))[:500]}</pre>")
        if error_details:
            html_body += _field("Detalhes Tecnicos", f"<pre>{error_details[:2000]}</pre>", "error-details")

        html_body += """
                </div>
                <div class="footer">
                    Este email foi enviado automaticamente pelo monitoramento da ZAP Confeitaria.<br>
                    Acesse o servidor para verificar os logs completos.
                </div>
            </div>
        </body>
        </html>
        """

        msg.attach(MIMEText(html_body, 'html'))

        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as server:
            if settings.SMTP_TLS:
                server.starttls()
            server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
            server.send_message(msg)

        logger.info(f"Notificacao de erro enviada: {error_type}")
        return True

    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Falha ao enviar notificacao de erro: {e}")
        return False


def notify_on_error(error_type: str = "API_ERROR", endpoint: str = None):
    """
    Decorator para notificar erros automaticamente em funcoes async.
    HTTPException (erros esperados, 4xx) nao gera notificacao.

    Uso:
        @notify_on_error("PDF_ERROR", "/api/functions/generate-quote-pdf")
        async def generate_quote_pdf(...):
            ...
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except HTTPException:
                raise
            except Exception as e:
                current_user = kwargs.get('current_user')
                send_error_notification(
                    error_type=error_type,
                    error_message=str(e),
                    error_details=traceback.format_exc(),
                    user_id=getattr(current_user, 'id', None),
                    user_email=getattr(current_user, 'email', None),
                    endpoint=endpoint or func.__name__
                )
                raise
        return wrapper
    return decorator
