from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "onboarding"
    db_username: str = "onboarding"
    db_password: str = "secret"

    pdf_engine: str = "pymupdf"
    pdf_raster_zoom: float = 1.5

    extraction_provider: str = "openai"
    extraction_temperature: float = 0.0
    extraction_timeout_seconds: int = 60
    extraction_openai_api_key: str = ""
    extraction_openai_model_name: str = "gpt-4o-mini"
    extraction_openai_compatible_base_url: str = ""
    extraction_openai_compatible_api_key: str = ""
    extraction_openai_compatible_model_name: str = ""
    extraction_openrouter_api_key: str = ""
    extraction_openrouter_model_name: str = ""
    extraction_groq_api_key: str = ""
    extraction_groq_model_name: str = ""
    extraction_together_api_key: str = ""
    extraction_together_model_name: str = ""
    extraction_ollama_api_key: str = "ollama"
    extraction_ollama_model_name: str = ""

    postal_lookup_base_url: str = "https://viacep.com.br/ws"
    postal_lookup_timeout_seconds: int = 10
    logo_fetch_timeout_seconds: int = 10

    max_upload_size_mb: int = 5
    captcha_delay_seconds: float = 1.5

    report_filename_prefix: str = "Cadastro_Vemplan"
    company_name: str = "VEMPLAN"
    contract_city: str = "São Paulo"
    contract_clipping: bool = True

    messaging_base_url: str = "https://wa.me"
    messaging_text: str = "Olá, finalizei meu cadastro. Segue em anexo a ficha cadastral."
