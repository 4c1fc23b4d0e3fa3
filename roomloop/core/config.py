"""
RoomLoop 설정

환경 변수(.env 포함)를 통한 설정 관리
"""

from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv()  # .env 파일 로드


class Settings(BaseSettings):
    """RoomLoop 서버 설정"""

    # Application
    app_name: str = "RoomLoop"
    version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 5500

    # Database - MongoDB
    mongo_url: str = "mongodb://localhost:27017"
    mongo_db_name: str = "roomloop"

    # JWT
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_hours: int = 24

    # CORS
    client_url: Optional[str] = None
    cors_origins: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Logging
    log_dir: str = "logs"

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def allowed_origins(self) -> List[str]:
        """HTTP CORS와 Socket.IO CORS에 공통으로 사용하는 허용 origin 목록"""
        if self.is_production:
            return [origin for origin in [self.client_url] if origin]
        return list(self.cors_origins)


settings = Settings()
