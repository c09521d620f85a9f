from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "almanac"
    db_password: str = ""
    db_name: str = "almanacdb"
    db_sslmode: str = "prefer"

    class Config:
        env_file = ".env"
        env_prefix = "ALMANAC_"
        case_sensitive = False
        extra = "ignore"

settings = Settings()
