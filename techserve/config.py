# techserve/config.py
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    # Database
    database_username: str
    database_password: str
    database_hostname: str
    database_port: str
    database_name: str
    
    # Auth
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    reset_token_expire_minutes: int = 60

    # Links sent out in verification / reset e-mails
    base_url: str = "http://localhost:8000"

    # Verification and matching policy
    kyc_auto_approve_confidence: float = 0.95
    nearest_technician_radius_km: float = 50.0

    # M-Pesa Daraja gateway
    mpesa_base_url: str = "https://sandbox.safaricom.co.ke"
    mpesa_consumer_key: str = ""
    mpesa_consumer_secret: str = ""
    mpesa_short_code: str = ""
    mpesa_passkey: str = ""
    mpesa_callback_url: str = "http://localhost:8000/payments/callback"
    mpesa_simulate: bool = True
    
    # CORS
    allowed_origins: List[str] = ["*"]

    log_level: str = "INFO"
    
    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
