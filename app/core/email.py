"""
ZAP Confeitaria - Email Service
Serviço de envio de emails (redefinição de senha e boas-vindas)
"""
import smtplib
import ssl
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional
import logging

from .config import settings

logger = logging.getLogger(__name__)


class EmailService:
    """Serviço de envio de emails via SMTP"""

    def __init__(self):
        self.host = settings.SMTP_HOST
        self.port = settings.SMTP_PORT
        self.user = settings.SMTP_USER
        self.password = settings.SMTP_PASSWORD
        self.from_email = settings.SMTP_FROM_EMAIL
        self.from_name = settings.SMTP_FROM_NAME
        self.use_tls = settings.SMTP_TLS
        self.use_ssl = settings.SMTP_SSL

    def is_configured(self) -> bool:
        """Verifica se o serviço de email está configurado"""
        return bool(self.user and self.password)

    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None
    ) -> bool:
        """
        Envia um email

        Args:
            to_email: Email do destinatário
            subject: Assunto do email
            html_content: Conteúdo HTML do email
            text_content: Conteúdo texto puro (opcional)

        Returns:
            True se enviado com sucesso, False caso contrário
        """
        if not self.is_configured():
            logger.warning("Email service not configured. Skipping email send.")
            return False

        try:
            message = MIMEMultipart("alternative")
            message["Subject"] = subject
            message["From"] = f"{self.from_name} <{self.from_email}>"
            message["To"] = to_email

            if text_content:
                message.attach(MIMEText(text_content, "plain", "utf-8"))
            message.attach(MIMEText(html_content, "html", "utf-8"))

            if self.use_ssl:
                context = ssl.create_default_context()
                with smtplib.SMTP_SSL(self.host, self.port, context=context) as server:
                    server.login(self.user, self.password)
                    server.sendmail(self.from_email, to_email, message.as_string())
            else:
                with smtplib.SMTP(self.host, self.port) as server:
                    if self.use_tls:
                        server.starttls()
                    server.login(self.user, self.password)
                    server.sendmail(self.from_email, to_email, message.as_string())

            logger.info(f"Email sent successfully to {to_email}")
            return True

        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to_email}: {str(e)}")
            return False

    def send_password_reset_email(self, to_email: str, name: str, reset_link: str) -> bool:
        """Envia email com o link de redefinição de senha"""
        subject = "Redefinir sua senha - ZAP Confeitaria"
        expires = settings.PASSWORD_RESET_EXPIRE_MINUTES

        html_content = f"""
<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
</head>
<body style="font-family: 'Segoe UI', Arial, sans-serif; line-height: 1.6; color: #333; background: #fdf2f8;">
    <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
        <div style="background: linear-gradient(135deg, #ec4899 0%, #db2777 100%); color: white; padding: 30px; text-align: center; border-radius: 10px 10px 0 0;">
            <h1 style="margin: 0; font-size: 26px;">ZAP Confeitaria</h1>
            <p style="margin: 5px 0 0 0;">Gestão para confeitarias</p>
        </div>

        <div style="background: white; padding: 30px; border: 1px solid #fbcfe8;">
            <h2 style="color: #db2777;">Olá, {name}!</h2>

            <p>Recebemos uma solicitação para redefinir a senha da sua conta.</p>

            <p style="text-align: center;">
                <a href="{reset_link}" style="display: inline-block; background: #db2777; color: white; padding: 15px 30px; text-decoration: none; border-radius: 8px; font-weight: bold;">REDEFINIR SENHA</a>
            </p>

            <p>Este link expira em <strong>{expires} minutos</strong>.</p>
            <p>Se você não solicitou a redefinição, ignore este email. Sua senha continua a mesma.</p>
        </div>

        <div style="background: #1f2937; color: #9ca3af; padding: 20px; text-align: center; border-radius: 0 0 10px 10px; font-size: 12px;">
            <p>Este e-mail foi enviado automaticamente pela ZAP Confeitaria.</p>
            <p><a href="{settings.APP_URL}" style="color: #f9a8d4;">{settings.APP_URL}</a></p>
        </div>
    </div>
</body>
</html>
"""

        text_content = f"""
Olá, {name}!

Recebemos uma solicitação para redefinir a senha da sua conta ZAP Confeitaria.

REDEFINIR SENHA: {reset_link}

Este link expira em {expires} minutos.
Se você não solicitou a redefinição, ignore este email.

---
ZAP Confeitaria
{settings.APP_URL}
"""

        return self.send_email(to_email, subject, html_content, text_content)

    def send_welcome_email(self, to_email: str, name: str) -> bool:
        """Envia email de boas-vindas após o cadastro"""
        subject = "Bem-vindo à ZAP Confeitaria"

        html_content = f"""
<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
</head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
    <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
        <h2 style="color: #db2777;">Olá, {name}!</h2>

        <p>Seu cadastro na <strong>ZAP Confeitaria</strong> foi realizado com sucesso.</p>

        <p>Para começar:</p>
        <ul>
            <li>Complete seu perfil com nome da empresa, logo e chave PIX</li>
            <li>Cadastre seus produtos e categorias</li>
            <li>Crie seu primeiro orçamento</li>
        </ul>

        <p><a href="{settings.APP_URL}">Acessar o sistema</a></p>

        <p>Bons negócios,<br>Equipe ZAP Confeitaria</p>
    </div>
</body>
</html>
"""

        return self.send_email(to_email, subject, html_content)


# Instancia global do servico de email
email_service = EmailService()
