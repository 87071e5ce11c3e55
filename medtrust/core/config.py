from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DECISION_SERVICE_URL: str = "http://localhost:5000/api/check-access"
    AUDIT_LOG_URL: str = "http://localhost:5000/api/patient-log"

    REQUEST_TIMEOUT: float = 5.0
    LOG_LEVEL: str = "INFO"
    DEFAULT_PURPOSE: str = "Patient_A_Record"

    class Config:
        env_file = ".env"

settings = Settings()
