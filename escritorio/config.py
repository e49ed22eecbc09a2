from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore"
    }

    API_TITLE: str = "API Escritório"
    API_DESCRIPTION: str = "API para controle de processos, movimentações e prazos do escritório"
    API_VERSION: str = "1.0.0"
    API_PORT: int = 3000
    API_HOST: str = "0.0.0.0"

    CORS_ORIGINS: List[str] = [
        "http://localhost",
        "http://localhost:3000",
        "http://localhost:8080",
    ]

    # Configurações PostgreSQL
    DATABASE_HOST: str = "localhost"
    DATABASE_PORT: int = 5432
    DATABASE_USER: str = "postgres"
    DATABASE_PASSWORD: str = ""
    DATABASE_NAME: str = "postgres"
    DATABASE_URL_OVERRIDE: Optional[str] = None
    DATABASE_ECHO: bool = False
    DATABASE_POOL_SIZE: int = 5
    DATABASE_MAX_OVERFLOW: int = 10

    # Tentativas de conexão na inicialização
    DATABASE_CONNECT_RETRIES: int = 5
    DATABASE_CONNECT_RETRY_DELAY: float = 5.0

    # Fuso usado para calcular o início da semana na gestão
    TIMEZONE: str = "America/Sao_Paulo"

    LOG_LEVEL: str = "INFO"

    @property
    def DATABASE_URL(self) -> str:
        """Constrói a URL de conexão do PostgreSQL para asyncpg"""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return (
            f"postgresql+asyncpg://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}"
            f"@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"
        )


settings = Settings()
