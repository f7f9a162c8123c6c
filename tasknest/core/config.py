from os import getenv

class Settings:
    DATABASE_URL = getenv("DATABASE_URL", "postgresql+psycopg://tasknest:tasknest@db:5432/tasknest")
    DB_CONNECT_RETRIES = int(getenv("DB_CONNECT_RETRIES", "5"))
    DB_RETRY_DELAY = float(getenv("DB_RETRY_DELAY", "5"))

    JWT_SECRET = getenv("JWT_SECRET", "dev-secret-change-in-prod")
    JWT_EXPIRE_MIN = int(getenv("JWT_EXPIRE_MIN", "10080"))  # 7 jours

    # SMTP pour les invitations
    SMTP_HOST = getenv("SMTP_HOST", "smtp.gmail.com")
    SMTP_PORT = int(getenv("SMTP_PORT", "587"))
    SMTP_EMAIL = getenv("SMTP_EMAIL")
    SMTP_PASSWORD = getenv("SMTP_PASSWORD")
    FROM_NAME = getenv("FROM_NAME", "TaskNest")
    FROM_EMAIL = getenv("FROM_EMAIL", "noreply@tasknest.app")

    FRONTEND_URL = getenv("FRONTEND_URL", "http://localhost:5173")
    LOG_LEVEL = getenv("LOG_LEVEL", "INFO")

settings = Settings()
